# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Log levels accepted by ``LoggingSettings`` and ``get_logger``.
"""

from __future__ import annotations

import logging
from enum import Enum


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_stdlib_level(self) -> int:
        return logging.getLevelNamesMapping()[self.value]

    @classmethod
    def parse(cls, value: LogLevel | str | int) -> LogLevel:
        """Read a level given by name (any case) or by stdlib number.

        Raises:
            ValueError: If ``value`` names no standard level
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value)
        if isinstance(value, int):
            name = logging.getLevelName(value)
        else:
            name = str(value).strip().upper()
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Invalid log level: {value!r}") from None
