from __future__ import annotations

import logging
from pathlib import Path

from dependency_injector.resources import Resource

from ...core.domain.outcome import RunDiagnostics
from .handlers import DiagnosticsHandler, build_human_console_handler, build_json_file_handler


class RunLogger(Resource):
    """Structured logger for one vuln-gate run.

    Every warning and error is also counted in the injected ``RunDiagnostics``
    so the CLI can pick an exit code without inspecting global logger state.
    """

    def init(
        self,
        *,
        diagnostics: RunDiagnostics,
        json_log_file: Path | None = None,
        logger_name: str = "vuln_gate",
        console_output: bool = True,
        level: str = "INFO",
    ) -> "RunLogger":
        """Initialize logger handlers.

        Args:
            diagnostics: Accumulator that records warnings and errors
            json_log_file: Optional JSONL file to append structured records to
            logger_name: Logger name
            console_output: Whether to print human-readable lines to stderr
            level: Logging level (DEBUG, INFO, WARNING, ERROR)

        Returns:
            Self for dependency_injector Resource pattern
        """
        numeric_level = getattr(logging, level.upper())

        self.diagnostics = diagnostics
        self._logger = logging.getLogger(logger_name)
        # Warnings must reach the diagnostics handler even when the console is quieter
        self._logger.setLevel(min(numeric_level, logging.WARNING))
        self._logger.propagate = False

        self._logger.handlers.clear()
        self._handlers: list[logging.Handler] = []

        diagnostics_handler = DiagnosticsHandler(diagnostics)
        self._logger.addHandler(diagnostics_handler)
        self._handlers.append(diagnostics_handler)

        if json_log_file is not None:
            file_handler = build_json_file_handler(json_log_file, level=numeric_level)
            self._logger.addHandler(file_handler)
            self._handlers.append(file_handler)

        if console_output:
            console_handler = build_human_console_handler(level=numeric_level)
            self._logger.addHandler(console_handler)
            self._handlers.append(console_handler)

        return self

    def shutdown(self, resource: "RunLogger") -> None:
        """Flush and close all handlers."""
        for handler in self._handlers:
            handler.flush()
            handler.close()

        self._logger.handlers.clear()

    def debug(self, message: str, **kwargs) -> None:
        if kwargs:
            self._logger.debug(message, extra=kwargs)
        else:
            self._logger.debug(message)

    def info(self, message: str, **kwargs) -> None:
        if kwargs:
            self._logger.info(message, extra=kwargs)
        else:
            self._logger.info(message)

    def warning(self, message: str, **kwargs) -> None:
        if kwargs:
            self._logger.warning(message, extra=kwargs)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        if kwargs:
            self._logger.error(message, extra=kwargs, exc_info=exc_info)
        else:
            self._logger.error(message, exc_info=exc_info)

    def exception(self, message: str, **kwargs) -> None:
        if kwargs:
            self._logger.exception(message, extra=kwargs)
        else:
            self._logger.exception(message)
