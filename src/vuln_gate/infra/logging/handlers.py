from __future__ import annotations

import logging
import sys
from logging import Handler
from pathlib import Path
from typing import TextIO

from ...core.domain.outcome import RunDiagnostics
from .formatters import HumanReadableFormatter, JSONFormatter


def build_json_file_handler(path: Path, level: int = logging.INFO) -> Handler:
    """Create a file handler with JSON formatting.

    Args:
        path: Path to log file (.jsonl)
        level: Logging level

    Returns:
        Configured FileHandler with JSON formatter
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    h = logging.FileHandler(path, encoding="utf-8", mode="a")
    h.setLevel(level)
    h.setFormatter(JSONFormatter())
    return h


def build_human_console_handler(level: int = logging.INFO, stream: TextIO | None = None) -> Handler:
    """Create a console handler with human-readable formatting.

    Writes to stderr by default so stdout stays free for reports.
    """
    h = logging.StreamHandler(stream if stream is not None else sys.stderr)
    h.setLevel(level)
    h.setFormatter(HumanReadableFormatter())
    return h


class DiagnosticsHandler(Handler):
    """Feeds warning and error records into a ``RunDiagnostics`` accumulator.

    Records logged with ``invalid_config=True`` count as invalid-configuration
    errors.
    """

    def __init__(self, diagnostics: RunDiagnostics) -> None:
        super().__init__(level=logging.WARNING)
        self.diagnostics = diagnostics

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno >= logging.ERROR:
            self.diagnostics.record_error(invalid_config=bool(getattr(record, "invalid_config", False)))
        elif record.levelno >= logging.WARNING:
            self.diagnostics.record_warning()
