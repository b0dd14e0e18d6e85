"""Logging setup for the `gridboard` package logger.

Only the package logger is configured; the host's root logging is left alone.
File output is written by a queue listener thread.
"""

from __future__ import annotations

import logging
import queue
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

from gridboard.api.logging import LayoutLoggingConfig
from gridboard.runtime.config import resolve_log_level_name
from gridboard.runtime.json_codec import dumps_text

PACKAGE_LOGGER = "gridboard"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_listener: QueueListener | None = None
_owned_handlers: list[logging.Handler] = []


class JsonFormatter(logging.Formatter):
    """One JSON object per record; `extra=` values are kept under "fields"."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        fields = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return dumps_text(payload)


def configure_layout_logging(config: LayoutLoggingConfig) -> logging.Logger:
    """Route `gridboard.*` records to the console and optionally to a file.

    Calling it again replaces the handlers a previous call installed.
    """
    global _listener

    shutdown_layout_logging()
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.getLevelNamesMapping().get(config.level_name.upper(), logging.INFO))
    logger.propagate = config.propagate

    console = logging.StreamHandler()
    console.setFormatter(_formatter(config.console_format))
    _attach(logger, console)

    if config.file_path:
        path = Path(config.file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8", delay=True)
        file_handler.setFormatter(_formatter(config.file_format))
        _owned_handlers.append(file_handler)
        records: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
        _listener = QueueListener(records, file_handler, respect_handler_level=True)
        _listener.start()
        _attach(logger, QueueHandler(records))
    return logger


def shutdown_layout_logging() -> None:
    """Flush queued file output and detach every handler this module installed."""
    global _listener
    if _listener is not None:
        _listener.stop()
        _listener = None
    logger = logging.getLogger(PACKAGE_LOGGER)
    while _owned_handlers:
        handler = _owned_handlers.pop()
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def setup_layout_logging() -> logging.Logger | None:
    """Install console logging unless the host already handles records."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logger.handlers or logging.getLogger().handlers:
        return None
    return configure_layout_logging(LayoutLoggingConfig(level_name=resolve_log_level_name(default="INFO")))


def _attach(logger: logging.Logger, handler: logging.Handler) -> None:
    _owned_handlers.append(handler)
    logger.addHandler(handler)


def _formatter(kind: str) -> logging.Formatter:
    if kind.strip().lower() == "json":
        return JsonFormatter()
    return logging.Formatter(TEXT_FORMAT)
