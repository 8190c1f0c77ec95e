# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Environment-driven defaults for datatap components.

Constructor arguments always win; these settings only fill in values the
caller left unspecified (for example the tap mode chosen by ``with_tap``
when no mode is passed, or the size of the shared worker executor).
"""

from __future__ import annotations

import functools
from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TapMode(str, Enum):
    """How a tap decorator schedules the secondary call."""

    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


class DataTapSettings(BaseSettings):
    """Settings for datatap, read from ``DATATAP_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DATATAP_",
        extra="ignore",
        case_sensitive=False,
    )

    tap_mode: TapMode = Field(
        default=TapMode.SEQUENTIAL,
        description="Default tap mode used when composing without an explicit mode",
    )
    executor_max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Worker threads for blocking calls; None uses the executor default",
    )
    executor_thread_name_prefix: str = Field(
        default="datatap",
        description="Thread name prefix for the shared worker executor",
    )

    @classmethod
    def load(cls) -> DataTapSettings:
        """Load settings from environment variables or defaults."""
        return cls()


@functools.cache
def get_settings() -> DataTapSettings:
    """Return the process-wide settings, loaded on first use."""
    return DataTapSettings.load()
