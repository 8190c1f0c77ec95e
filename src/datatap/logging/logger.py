"""
Logger implementation for datatap.

This module configures standard library loggers with a structured formatter
driven by ``LoggingSettings``.
"""

from __future__ import annotations

import datetime
import enum
import json
import logging
import sys
import uuid
from logging import StreamHandler
from typing import Any

from datatap.logging.config import LoggingSettings
from datatap.logging.level import LogLevel

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "taskName"}

# Marks handlers installed by get_logger so reconfiguration replaces only ours.
_HANDLER_MARKER = "_datatap_handler"


class StructuredFormatter(logging.Formatter):
    """Formatter that renders ``extra`` fields as structured data."""

    def __init__(
        self,
        json_format: bool = False,
        include_timestamp: bool = True,
        include_level: bool = True,
    ) -> None:
        """Initialize a structured formatter.

        Args:
            json_format: Whether to format logs as JSON
            include_timestamp: Whether to include timestamps in logs
            include_level: Whether to include log level in logs
        """
        self.json_format = json_format
        self.include_timestamp = include_timestamp
        self.include_level = include_level

        fmt = "%(name)s: %(message)s"
        if include_timestamp:
            fmt = "%(asctime)s " + fmt
        if include_level and not json_format:
            fmt = fmt + " [%(levelname)s]"

        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record with structured data.

        Args:
            record: The log record to format

        Returns:
            Formatted log string
        """
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }

        if self.json_format:
            return self._format_json(record, extra)
        return self._format_text(record, extra)

    def _format_json(self, record: logging.LogRecord, extra: dict[str, Any]) -> str:
        log_data: dict[str, Any] = {
            "message": record.getMessage(),
            "name": record.name,
            **extra,
        }
        if self.include_level:
            log_data["level"] = record.levelname
        if self.include_timestamp:
            log_data["timestamp"] = self.formatTime(record, self.datefmt)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
            log_data["error"] = str(record.exc_info[1])

        return json.dumps(log_data, default=_json_default)

    def _format_text(self, record: logging.LogRecord, extra: dict[str, Any]) -> str:
        message = super().format(record)
        if not extra:
            return message

        # Exception text is appended by the base formatter; keep context on the
        # first line so it stays next to the message.
        first, sep, rest = message.partition("\n")
        ctx_str = " ".join(f"{k}={self._format_value(v)}" for k, v in extra.items())
        return f"{first} {ctx_str}{sep}{rest}"

    def _format_value(self, value: Any) -> str:
        if isinstance(value, str):
            if " " in value:
                return f'"{value}"'
            return value
        if isinstance(value, datetime.datetime | datetime.date):
            return value.isoformat()
        if isinstance(value, uuid.UUID):
            return str(value)
        if isinstance(value, enum.Enum):
            return value.name
        if isinstance(value, BaseException):
            return f"{type(value).__name__}({value})"
        try:
            return json.dumps(value, default=_json_default)
        except (TypeError, ValueError):
            return str(value)


def _json_default(obj: Any) -> Any:
    if isinstance(obj, datetime.datetime | datetime.date):
        return obj.isoformat()
    if isinstance(obj, uuid.UUID):
        return str(obj)
    if isinstance(obj, enum.Enum):
        return obj.value
    if hasattr(obj, "model_dump"):  # Pydantic v2 models
        return obj.model_dump()
    return str(obj)


def configure_logger(
    logger: logging.Logger, settings: LoggingSettings
) -> logging.Logger:
    """
    Attach datatap handlers to ``logger`` according to ``settings``.

    Handlers previously installed by datatap are replaced; handlers added by
    the application are left alone.

    Args:
        logger: The logger to configure
        settings: Logging settings to apply

    Returns:
        The same logger
    """
    logger.setLevel(settings.level.to_stdlib_level())

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    formatter = StructuredFormatter(json_format=settings.json_format)

    handlers: list[logging.Handler] = []
    if settings.console_enabled:
        handlers.append(StreamHandler(sys.stdout))
    if settings.file_path:
        handlers.append(logging.FileHandler(settings.file_path))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARKER, True)
        logger.addHandler(handler)

    return logger


def get_logger(
    name: str,
    level: LogLevel | None = None,
    settings: LoggingSettings | None = None,
) -> logging.Logger:
    """Get a logger for the specified name.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override
        settings: Optional settings (loads from environment if None)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    configure_logger(logger, settings or LoggingSettings.load())

    if level is not None:
        logger.setLevel(level.to_stdlib_level())

    return logger
