# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap

"""
datatap: decorators and adapters for query, command, repository and unit of
work contracts.
"""

from __future__ import annotations

from datatap.compose import Contract, catch, detect_contract, join, to_async, to_sync, with_tap
from datatap.config import DataTapSettings, TapMode, get_settings
from datatap.decorators import (
    AsyncCommandAdapter,
    AsyncCommandDecorator,
    AsyncCommandExceptionHandler,
    AsyncCommandTap,
    AsyncQueryAdapter,
    AsyncQueryDecorator,
    AsyncQueryExceptionHandler,
    AsyncRepositoryAdapter,
    AsyncRepositoryDecorator,
    AsyncRepositoryExceptionHandler,
    AsyncRepositoryTap,
    AsyncUnitOfWorkAdapter,
    AsyncUnitOfWorkDecorator,
    AsyncUnitOfWorkExceptionHandler,
    AsyncUnitOfWorkTap,
    CommandDecorator,
    CommandExceptionHandler,
    CommandTap,
    ComposedAsyncRepository,
    ComposedRepository,
    QueryDecorator,
    QueryExceptionHandler,
    RepositoryDecorator,
    RepositoryExceptionHandler,
    RepositoryTap,
    SyncCommandAdapter,
    SyncQueryAdapter,
    SyncRepositoryAdapter,
    SyncUnitOfWorkAdapter,
    UnitOfWorkDecorator,
    UnitOfWorkExceptionHandler,
    UnitOfWorkTap,
)
from datatap.entity import EntityProtocol, IdentityProtocol
from datatap.errors import (
    ConfigurationError,
    DataTapError,
    InvalidDependencyError,
    MissingDependencyError,
    UnsupportedContractError,
)
from datatap.execution import run_in_worker, run_synchronously, shutdown_executor
from datatap.factories import (
    AsyncEntityFactory,
    EntityFactory,
    SequentialUUIDFactory,
    SequentialUUIDType,
    UUIDFactory,
)
from datatap.protocols import (
    AsyncCommandProtocol,
    AsyncQueryProtocol,
    AsyncRepositoryProtocol,
    AsyncUnitOfWorkProtocol,
    CommandProtocol,
    QueryProtocol,
    RepositoryProtocol,
    UnitOfWorkProtocol,
)

__version__ = "0.1.0"

__all__ = [
    # Contracts
    "IdentityProtocol",
    "EntityProtocol",
    "QueryProtocol",
    "CommandProtocol",
    "RepositoryProtocol",
    "UnitOfWorkProtocol",
    "AsyncQueryProtocol",
    "AsyncCommandProtocol",
    "AsyncRepositoryProtocol",
    "AsyncUnitOfWorkProtocol",
    # Forwarding bases
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
    "run_in_worker",
    "run_synchronously",
    "shutdown_executor",
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
    "Contract",
    "detect_contract",
    "catch",
    "with_tap",
    "to_async",
    "to_sync",
    "join",
    # Factories
    "EntityFactory",
    "AsyncEntityFactory",
    "UUIDFactory",
    "SequentialUUIDFactory",
    "SequentialUUIDType",
    # Settings and errors
    "DataTapSettings",
    "get_settings",
    "DataTapError",
    "ConfigurationError",
    "MissingDependencyError",
    "InvalidDependencyError",
    "UnsupportedContractError",
]
