# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap

"""
Public API for datatap logging.
"""

from __future__ import annotations

from datatap.logging.config import LoggingSettings
from datatap.logging.level import LogLevel
from datatap.logging.logger import StructuredFormatter, configure_logger, get_logger
from datatap.logging.protocols import LoggerProtocol

__all__ = [
    # Core interfaces
    "LoggerProtocol",
    "LogLevel",
    # Implementation
    "StructuredFormatter",
    # Settings
    "LoggingSettings",
    # Factory functions
    "configure_logger",
    "get_logger",
]
