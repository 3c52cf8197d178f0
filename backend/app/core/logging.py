"""JSON log output."""

import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from app.core.config import settings

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx")


class JsonLogFormatter(jsonlogger.JsonFormatter):
    """Every record carries timestamp, level, logger, event and env, plus its extras."""

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.pop("asctime", None)
        log_record.update(
            timestamp=self.formatTime(record, self.datefmt),
            level=record.levelname,
            logger=record.name,
            event=log_record.pop("message", None) or record.getMessage(),
            env=settings.ENV,
        )


def setup_logging(level: str | None = None) -> None:
    """Send root logging to stdout as JSON. Safe to call repeatedly."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonLogFormatter(datefmt="%Y-%m-%dT%H:%M:%S"))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel((level or settings.LOG_LEVEL).upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
