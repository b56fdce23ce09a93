"""
Structured JSON Logging.

Every record is emitted as one JSON object per line, to stdout and to a
rotating log file.  Context passed through ``extra=`` is kept structured
(lists of cache keys stay lists) so cache diagnostics and ``AUDIT:``
entries can be filtered by field.

Loggers are injected.  Subsystems derive their own channel from the
composition root's logger with :meth:`StructuredLogger.child`::

    log = StructuredLogger(name="fintrack")
    cache_log = log.child("cache")          # "fintrack.cache"
    cache_log.debug("Cache hit: %s", "budgets")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO

from fintrack.utils.general import JsonSafeType, convert_to_json_safe

if TYPE_CHECKING:
    from fintrack.config import AppConfig

# Attributes every LogRecord carries; anything else arrived via ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """Render a record as ``{timestamp, level, logger_name, message, ...}``.

    ``extra`` holds caller context converted to JSON-safe values;
    ``exception`` holds the formatted traceback when ``exc_info`` is set.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, JsonSafeType] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger_name": record.name,
            "message": record.getMessage(),
        }

        context = {
            key: convert_to_json_safe(value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        }
        if context:
            entry["extra"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class StructuredLogger:
    """Injectable wrapper around a JSON-configured ``logging.Logger``.

    Handlers are attached once per logger name.  When the log file cannot
    be opened the logger keeps writing to the stream only.

    Parameters
    ----------
    name:
        Dotted logger name.
    level:
        Threshold for the logger and both handlers.
    stream:
        Console target, ``sys.stdout`` by default.
    config:
        Source of ``LOG_FILE`` / ``LOG_MAX_BYTES`` / ``LOG_BACKUP_COUNT``.
        Falls back to :func:`fintrack.config.get_config`.
    log_file:
        Overrides ``config.LOG_FILE``.
    """

    def __init__(
        self,
        name: str = "fintrack",
        level: int = logging.INFO,
        stream: Optional[TextIO] = None,
        config: Optional[AppConfig] = None,
        log_file: Optional[str] = None,
    ) -> None:
        if config is None:
            # Imported here: the config module logs through stdlib logging
            # while it is being built.
            from fintrack.config import get_config
            config = get_config()

        self._config = config
        self._level = level
        self._stream = stream
        self._log_file = log_file or config.LOG_FILE
        self._logger: logging.Logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False

        if not self._logger.handlers:
            self._attach_handlers()

    def _attach_handlers(self) -> None:
        formatter = JSONFormatter()

        console = logging.StreamHandler(self._stream or sys.stdout)
        console.setFormatter(formatter)
        self._logger.addHandler(console)

        try:
            path = Path(self._log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            rotating = RotatingFileHandler(
                filename=str(path),
                maxBytes=self._config.LOG_MAX_BYTES,
                backupCount=self._config.LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
        except OSError as exc:
            self._logger.warning(
                "Could not open log file '%s': %s. Logging to console only.",
                self._log_file,
                exc,
            )
            return
        rotating.setFormatter(formatter)
        self._logger.addHandler(rotating)

    @property
    def logger(self) -> logging.Logger:
        """The underlying ``logging.Logger``."""
        return self._logger

    @property
    def name(self) -> str:
        return self._logger.name

    def child(self, suffix: str) -> StructuredLogger:
        """Logger named ``<name>.<suffix>`` with the same level and targets."""
        return StructuredLogger(
            name=f"{self.name}.{suffix}",
            level=self._level,
            stream=self._stream,
            config=self._config,
            log_file=self._log_file,
        )

    def debug(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.critical(msg, *args, **kwargs)


def get_logger(name: str = "fintrack") -> StructuredLogger:
    """Convenience factory using the process configuration."""
    return StructuredLogger(name=name)
