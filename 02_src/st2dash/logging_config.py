"""Structured logging configuration for the ST2 dashboard."""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from .config import DEFAULT_LOG_PATH

# Chatty third-party loggers; frame-level traffic is logged by st2dash itself
LIBRARY_LEVELS = {
    "websockets": "WARNING",
    "uvicorn.access": "WARNING",
}


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return str(value)


class JSONFormatter(logging.Formatter):
    """One JSON object per record; `extra={"context": {...}}` is carried as is."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=_json_default)


def _handlers(log_file: str, console: bool) -> dict[str, dict]:
    handlers = {
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "formatter": "json",
            "encoding": "utf-8",
        },
    }
    if console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        }
    return handlers


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    console: bool = True,
) -> None:
    """
    Route all records through JSONFormatter to a rotating file (and stdout).

    Args:
        log_level: Root level. Defaults to the LOG_LEVEL env var or INFO.
        log_file: Defaults to the LOG_FILE env var or 04_logs/st2dash.log.
        console: Also log to stdout.
    """
    level = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_file = log_file or os.getenv("LOG_FILE") or str(DEFAULT_LOG_PATH)
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    handlers = _handlers(log_file, console)

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"json": {"()": JSONFormatter}},
        "handlers": handlers,
        "loggers": {name: {"level": lib_level} for name, lib_level in LIBRARY_LEVELS.items()},
        "root": {"level": level, "handlers": list(handlers)},
    })


def get_logger(name: str) -> logging.Logger:
    """Module logger; call with __name__."""
    return logging.getLogger(name)
