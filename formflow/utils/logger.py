"""Structured JSON Logging - one JSON object per line, tagged with the request's correlation id

Workflow code passes run identity through `extra=`; JsonFormatter copies the
known keys (RUN_FIELDS) into the output so a submission can be followed
across the engine, its executors and the repositories.
"""
import json
import logging
import os
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from ..config.settings import Settings, settings as default_settings
from .time import format_iso, utc_now

correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Keys accepted through `extra=` and copied into the JSON line
RUN_FIELDS = ("form_id", "submission_id", "step_id", "step_type", "status", "error_code")

# Chatty libraries and the level they are capped at
QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "pymongo": logging.WARNING,
}

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


class JsonFormatter(logging.Formatter):
    """Render a record as a single JSON line"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": format_iso(utc_now()),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = correlation_id_var.get()
        if correlation_id:
            entry["correlation_id"] = correlation_id

        entry.update({
            field: getattr(record, field)
            for field in RUN_FIELDS
            if hasattr(record, field)
        })

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _rotating_file(path: str, formatter: logging.Formatter, level: int = logging.NOTSET) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(config: Optional[Settings] = None) -> None:
    """
    Route the root logger to stdout plus app.log and error.log under LOGS_PATH

    Existing root handlers are replaced, so calling this twice is harmless.
    """
    config = config or default_settings
    os.makedirs(config.logs_path, exist_ok=True)

    formatter = JsonFormatter()
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(console)
    root.addHandler(_rotating_file(os.path.join(config.logs_path, "app.log"), formatter))
    root.addHandler(_rotating_file(os.path.join(config.logs_path, "error.log"), formatter, logging.ERROR))

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()
