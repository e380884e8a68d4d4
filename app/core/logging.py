"""
app/core/logging.py

Purpose: Logging configuration

- JSON lines in production, colored single lines in development
- Log level from settings, noisy driver/client loggers capped at WARNING
- Request-scoped context (admin, organization, gym_id, user_id) attached
  to every record emitted inside a LogContext block
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from app.core.config import settings

# Record attributes shown alongside the message when present
CONTEXT_FIELDS = ("admin", "organization", "gym_id", "user_id", "request_id")

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"

_log_context: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def _context_of(record: logging.LogRecord) -> Dict[str, Any]:
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


class ContextFilter(logging.Filter):
    """Copies the active LogContext onto records; explicit ``extra`` values win."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per line for log collectors."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            **_context_of(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Readable colored output for local runs."""

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelname, RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}[{clock}] {record.levelname:<8}{RESET} {record.name}: {record.getMessage()}"

        context = _context_of(record)
        if context:
            line += " [" + ", ".join(f"{key}={value}" for key, value in context.items()) + "]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging() -> logging.Logger:
    """Installs the stdout handler on the root logger (replacing any others)."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if settings.is_production else DevelopmentFormatter())
    handler.addFilter(ContextFilter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)

    for noisy in ("httpx", "motor", "pymongo", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = get_logger("logging")
    logger.info(f"Logging configured ({settings.ENVIRONMENT}, level {settings.LOG_LEVEL})")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``gymvisa`` namespace."""
    return logging.getLogger(f"gymvisa.{name}")


def mask_token(token: str, visible: int = 20) -> str:
    """Shortens a push token for logs and error reports."""
    if not token:
        return ""
    return token[:visible] + "..." if len(token) > visible else token


class LogContext:
    """
    Adds context to every record logged inside the block.

    Usage:
        with LogContext(organization="Acme"):
            logger.info("Creating organization users")

    Blocks nest; the inner values are layered over the outer ones and the
    outer context is restored on exit. Context is tracked per task, so
    concurrent requests do not see each other's values.
    """

    def __init__(self, **kwargs):
        self.context = kwargs
        self._token = None

    def __enter__(self):
        self._token = _log_context.set({**_log_context.get(), **self.context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _log_context.reset(self._token)
