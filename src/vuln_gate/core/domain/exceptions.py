"""Domain exceptions for vuln_gate."""

from __future__ import annotations

from pathlib import Path


class VulnGateError(Exception):
    """Base class for errors raised by vuln_gate."""


class ConfigurationError(VulnGateError):
    """Raised when the caller asked for something that cannot be done as configured."""


class InvalidOutputDirectiveError(ConfigurationError):
    def __init__(self, directive: str, message: str | None = None) -> None:
        self.directive = directive
        if message is None:
            message = f"invalid output directive: {directive!r}"
        super().__init__(message)


class UnknownFormatError(ConfigurationError):
    """Raised when a report format name is not known to the renderer."""

    def __init__(self, fmt: str, known: tuple[str, ...] = ()) -> None:
        self.format = fmt
        self.known = known
        message = f"unknown output format: {fmt!r}"
        if known:
            message += f" (available: {', '.join(known)})"
        super().__init__(message)


class SinkOpenError(VulnGateError):
    def __init__(self, target: str, cause: Exception) -> None:
        self.target = target
        super().__init__(f"failed to create output file: {target}: {cause}")


class RenderError(VulnGateError):
    def __init__(self, fmt: str, cause: Exception) -> None:
        self.format = fmt
        super().__init__(f"failed to write output: {fmt}: {cause}")


class SnapshotLoadError(VulnGateError):
    """Raised when a scan snapshot cannot be read or parsed.

    Callers are expected to recover by substituting an empty snapshot.
    """

    def __init__(self, path: Path | str, cause: Exception | str) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class ProvenanceError(VulnGateError):
    """Raised when repository metadata cannot be opened."""

    def __init__(self, path: Path | str, cause: Exception) -> None:
        self.path = Path(path)
        super().__init__(f"failed to open git repository at {path}: {cause}")
