# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Configuration for datatap's own loggers.

Settings are read from ``DATATAP_LOGGING_*`` environment variables. A library
should not print unless asked to, so no handler is installed by default and
records only propagate to the application's logging setup.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from datatap.logging.level import LogLevel


class LoggingSettings(BaseSettings):
    """Level, format and destinations of the ``datatap.*`` loggers."""

    model_config = SettingsConfigDict(env_prefix="DATATAP_LOGGING_", extra="ignore")

    level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    json_format: bool = Field(default=False, description="Render records as JSON")
    console_enabled: bool = Field(
        default=False, description="Write records to stdout"
    )
    file_path: str | None = Field(
        default=None, description="Also append records to this file"
    )

    @field_validator("level", mode="before")
    @classmethod
    def parse_level(cls, v: Any) -> LogLevel:
        return LogLevel.parse(v)

    @classmethod
    def load(cls) -> LoggingSettings:
        """Load logging settings from the environment."""
        return cls()
