from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter


class JSONFormatter(JsonFormatter):
    """JSON formatter using python-json-logger.

    Structured fields passed through ``extra`` end up as top-level keys.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['message'] = record.getMessage()


class HumanReadableFormatter(logging.Formatter):
    """Console formatter; mirrors the terse style of CI log output."""

    def __init__(self) -> None:
        super().__init__(fmt='%(levelname)s: %(message)s')

    def format(self, record: logging.LogRecord) -> str:
        # Informational lines are printed bare
        if record.levelno == logging.INFO:
            return record.getMessage()
        return super().format(record)
