from __future__ import annotations

from .logger import RunLogger
from .handlers import DiagnosticsHandler, build_json_file_handler, build_human_console_handler
from .formatters import JSONFormatter, HumanReadableFormatter

__all__ = [
    "RunLogger",
    "DiagnosticsHandler",
    "build_json_file_handler",
    "build_human_console_handler",
    "JSONFormatter",
    "HumanReadableFormatter",
]
