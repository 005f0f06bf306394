from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RunOutcome(str, Enum):
    SUCCESS = "success"
    VULNERABILITIES_FOUND = "vulnerabilities_found"
    NO_PACKAGES_FOUND = "no_packages_found"
    FAILED = "failed"


EXIT_OK = 0
EXIT_VULNERABILITIES_FOUND = 1
EXIT_GENERIC_ERROR = 127
EXIT_NO_PACKAGES_FOUND = 128
EXIT_INVALID_CONFIG = 130


@dataclass
class RunDiagnostics:
    """Accumulates what went wrong during a run.

    Filled by the logging layer (see ``DiagnosticsHandler``) or directly by the
    CLI, and read once at the end to pick the exit code.
    """
    warnings: int = 0
    errors: int = 0
    invalid_config_errors: int = 0

    def record_warning(self) -> None:
        self.warnings += 1

    def record_error(self, *, invalid_config: bool = False) -> None:
        self.errors += 1
        if invalid_config:
            self.invalid_config_errors += 1

    @property
    def has_warned(self) -> bool:
        return self.warnings > 0

    @property
    def has_errored(self) -> bool:
        return self.errors > 0

    @property
    def has_errored_because_invalid_config(self) -> bool:
        return self.invalid_config_errors > 0


def exit_code_for(outcome: RunOutcome, diagnostics: RunDiagnostics) -> int:
    """Map a run outcome plus accumulated diagnostics to a process exit code.

    Invalid configuration wins over everything else, since a bad configuration
    may be what caused any other failure.
    """
    if diagnostics.has_errored_because_invalid_config:
        return EXIT_INVALID_CONFIG
    if outcome is RunOutcome.VULNERABILITIES_FOUND:
        return EXIT_VULNERABILITIES_FOUND
    if outcome is RunOutcome.NO_PACKAGES_FOUND:
        return EXIT_NO_PACKAGES_FOUND
    if outcome is RunOutcome.FAILED or diagnostics.has_errored:
        return EXIT_GENERIC_ERROR
    return EXIT_OK
