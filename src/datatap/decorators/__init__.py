# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap

"""
Decorators and adapters for the datatap data contracts.
"""

from __future__ import annotations

from datatap.config import TapMode
from datatap.decorators.adapters import (
    AsyncCommandAdapter,
    AsyncQueryAdapter,
    AsyncRepositoryAdapter,
    AsyncUnitOfWorkAdapter,
    SyncCommandAdapter,
    SyncQueryAdapter,
    SyncRepositoryAdapter,
    SyncUnitOfWorkAdapter,
)
from datatap.decorators.base import (
    AsyncCommandDecorator,
    AsyncQueryDecorator,
    AsyncRepositoryDecorator,
    AsyncUnitOfWorkDecorator,
    CommandDecorator,
    Decorator,
    QueryDecorator,
    RepositoryDecorator,
    UnitOfWorkDecorator,
)
from datatap.decorators.composed import ComposedAsyncRepository, ComposedRepository
from datatap.decorators.exception_handler import (
    AsyncCommandExceptionHandler,
    AsyncQueryExceptionHandler,
    AsyncRepositoryExceptionHandler,
    AsyncUnitOfWorkExceptionHandler,
    CommandExceptionHandler,
    QueryExceptionHandler,
    RepositoryExceptionHandler,
    UnitOfWorkExceptionHandler,
)
from datatap.decorators.tap import (
    AsyncCommandTap,
    AsyncRepositoryTap,
    AsyncUnitOfWorkTap,
    CommandTap,
    RepositoryTap,
    UnitOfWorkTap,
)

__all__ = [
    # Forwarding bases
    "Decorator",
    "QueryDecorator",
    "CommandDecorator",
    "RepositoryDecorator",
    "UnitOfWorkDecorator",
    "AsyncQueryDecorator",
    "AsyncCommandDecorator",
    "AsyncRepositoryDecorator",
    "AsyncUnitOfWorkDecorator",
    # Execution adapters
    "AsyncQueryAdapter",
    "AsyncCommandAdapter",
    "AsyncRepositoryAdapter",
    "AsyncUnitOfWorkAdapter",
    "SyncQueryAdapter",
    "SyncCommandAdapter",
    "SyncRepositoryAdapter",
    "SyncUnitOfWorkAdapter",
    # Exception recovery
    "QueryExceptionHandler",
    "CommandExceptionHandler",
    "RepositoryExceptionHandler",
    "UnitOfWorkExceptionHandler",
    "AsyncQueryExceptionHandler",
    "AsyncCommandExceptionHandler",
    "AsyncRepositoryExceptionHandler",
    "AsyncUnitOfWorkExceptionHandler",
    # Taps
    "TapMode",
    "CommandTap",
    "RepositoryTap",
    "UnitOfWorkTap",
    "AsyncCommandTap",
    "AsyncRepositoryTap",
    "AsyncUnitOfWorkTap",
    # Composition
    "ComposedRepository",
    "ComposedAsyncRepository",
]
