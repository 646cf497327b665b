# selectorkit/utils/logger.py
"""Logging for selector-kit
--------------------------
Library modules only ask for loggers; nothing here touches the root logger
until an entry point (the CLI, a script) calls `configure_logging()`.
Applications embedding the builder keep their own handlers and levels.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from selectorkit.utils.config import LogLevel, Settings, get_settings


__all__ = [
    "configure_logging",
    "get_logger",
    "set_log_level",
    "bind",
    "unbind",
    "log_with_context",
    "JsonFormatter",
]


_lock = threading.Lock()
_configured = False
_context: Dict[str, Any] = {}  # shared by every adapter returned from get_logger


class JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, msg, bound context, thread, process."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            entry.update(context)
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        entry["thread"] = record.threadName
        entry["process"] = record.process
        return json.dumps(entry, ensure_ascii=False, default=str)


def _console_handler(settings: Settings) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=settings.COLORIZED_OUTPUT,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _file_handler(settings: Settings) -> logging.Handler:
    settings.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(settings.LOG_FILE),
        maxBytes=1024 * 1024,
        backupCount=3,
        encoding="utf-8",
        delay=True,
    )
    handler.setFormatter(JsonFormatter())
    return handler


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Install selector-kit's handlers on the root logger (once per process).

    Replaces existing root handlers, so only entry points should call this.
    """
    global _configured
    with _lock:
        if _configured:
            return
        settings = settings or get_settings()
        level = getattr(logging, settings.LOG_LEVEL.value)

        root = logging.getLogger()
        for h in list(root.handlers):
            root.removeHandler(h)

        handlers = [_console_handler(settings)]
        if settings.LOG_TO_FILE:
            handlers.append(_file_handler(settings))
        for h in handlers:
            h.setLevel(level)
            root.addHandler(h)
        root.setLevel(level)
        _configured = True


def get_logger(name: Optional[str] = None) -> logging.LoggerAdapter:
    """Logger adapter carrying the bound context; does not configure anything."""
    return logging.LoggerAdapter(logging.getLogger(name or "selectorkit"), extra={"context": _context})


def set_log_level(level: LogLevel | str) -> None:
    configure_logging()
    name = level.value if isinstance(level, LogLevel) else level.upper()
    py_level = getattr(logging, name, logging.INFO)
    root = logging.getLogger()
    root.setLevel(py_level)
    for h in root.handlers:
        h.setLevel(py_level)


def bind(**kwargs: Any) -> None:
    """Attach context (e.g. run_id) to every later record from get_logger adapters."""
    _context.update(kwargs)


def unbind(*keys: str) -> None:
    for k in keys:
        _context.pop(k, None)


def log_with_context(logger: logging.LoggerAdapter, **kwargs: Any) -> logging.LoggerAdapter:
    """
    Scoped adapter: bound context plus `kwargs`, for one section of work.

        scoped = log_with_context(log, recipe="gallery")
        scoped.info("rendering")
    """
    return logging.LoggerAdapter(logger.logger, extra={"context": {**_context, **kwargs}})
