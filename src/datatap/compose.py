# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Composition helpers.

These functions pick the decorator class matching the contract an object
implements, so pipelines can be assembled without naming every class::

    repository = with_tap(
        catch(to_async(SqlRepository()), TimeoutError, lambda exc: True),
        search_index,
        logger=get_logger(__name__),
    )

An object is treated as a repository when it has both ``get_all`` and
``add``, as a command service when it has only ``add``, as a query service
when it has only ``get_all`` and as a unit of work when it has ``commit``.
Whether it is async is decided by the detected method.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from datatap.config import TapMode, get_settings
from datatap.decorators import (
    AsyncCommandAdapter,
    AsyncCommandExceptionHandler,
    AsyncCommandTap,
    AsyncQueryAdapter,
    AsyncQueryExceptionHandler,
    AsyncRepositoryAdapter,
    AsyncRepositoryExceptionHandler,
    AsyncRepositoryTap,
    AsyncUnitOfWorkAdapter,
    AsyncUnitOfWorkExceptionHandler,
    AsyncUnitOfWorkTap,
    CommandExceptionHandler,
    CommandTap,
    ComposedAsyncRepository,
    ComposedRepository,
    QueryExceptionHandler,
    RepositoryExceptionHandler,
    RepositoryTap,
    SyncCommandAdapter,
    SyncQueryAdapter,
    SyncRepositoryAdapter,
    SyncUnitOfWorkAdapter,
    UnitOfWorkExceptionHandler,
    UnitOfWorkTap,
)
from datatap.errors import MissingDependencyError, UnsupportedContractError
from datatap.execution import is_async_callable
from datatap.logging import LoggerProtocol, get_logger

logger = get_logger("datatap.compose")


class Contract(str, Enum):
    """The data contracts datatap can decorate."""

    QUERY = "query"
    COMMAND = "command"
    REPOSITORY = "repository"
    UNIT_OF_WORK = "unit_of_work"


_CONTRACT_METHODS = {
    Contract.QUERY: "get_all",
    Contract.COMMAND: "add",
    Contract.REPOSITORY: "get_all",
    Contract.UNIT_OF_WORK: "commit",
}

_EXCEPTION_HANDLERS: dict[tuple[Contract, bool], type] = {
    (Contract.QUERY, False): QueryExceptionHandler,
    (Contract.COMMAND, False): CommandExceptionHandler,
    (Contract.REPOSITORY, False): RepositoryExceptionHandler,
    (Contract.UNIT_OF_WORK, False): UnitOfWorkExceptionHandler,
    (Contract.QUERY, True): AsyncQueryExceptionHandler,
    (Contract.COMMAND, True): AsyncCommandExceptionHandler,
    (Contract.REPOSITORY, True): AsyncRepositoryExceptionHandler,
    (Contract.UNIT_OF_WORK, True): AsyncUnitOfWorkExceptionHandler,
}

_TAPS: dict[tuple[Contract, bool], type] = {
    (Contract.COMMAND, False): CommandTap,
    (Contract.REPOSITORY, False): RepositoryTap,
    (Contract.UNIT_OF_WORK, False): UnitOfWorkTap,
    (Contract.COMMAND, True): AsyncCommandTap,
    (Contract.REPOSITORY, True): AsyncRepositoryTap,
    (Contract.UNIT_OF_WORK, True): AsyncUnitOfWorkTap,
}

_ASYNC_ADAPTERS: dict[Contract, type] = {
    Contract.QUERY: AsyncQueryAdapter,
    Contract.COMMAND: AsyncCommandAdapter,
    Contract.REPOSITORY: AsyncRepositoryAdapter,
    Contract.UNIT_OF_WORK: AsyncUnitOfWorkAdapter,
}

_SYNC_ADAPTERS: dict[Contract, type] = {
    Contract.QUERY: SyncQueryAdapter,
    Contract.COMMAND: SyncCommandAdapter,
    Contract.REPOSITORY: SyncRepositoryAdapter,
    Contract.UNIT_OF_WORK: SyncUnitOfWorkAdapter,
}


def detect_contract(obj: Any) -> tuple[Contract, bool]:
    """
    Work out which contract an object implements and whether it is async.

    Args:
        obj: The object to inspect

    Returns:
        A ``(contract, is_async)`` pair

    Raises:
        UnsupportedContractError: If the object implements no known contract
    """
    has_query = callable(getattr(obj, "get_all", None))
    has_command = callable(getattr(obj, "add", None))

    if has_query and has_command:
        contract = Contract.REPOSITORY
    elif has_command:
        contract = Contract.COMMAND
    elif has_query:
        contract = Contract.QUERY
    elif callable(getattr(obj, "commit", None)):
        contract = Contract.UNIT_OF_WORK
    else:
        raise UnsupportedContractError(obj, "detect_contract")

    return contract, is_async_callable(getattr(obj, _CONTRACT_METHODS[contract]))


def _select(table: dict[tuple[Contract, bool], type], inner: Any, operation: str) -> type:
    if inner is None:
        raise MissingDependencyError("inner", operation)
    contract, is_async = detect_contract(inner)
    try:
        decorator = table[contract, is_async]
    except KeyError:
        raise UnsupportedContractError(inner, operation) from None
    logger.debug(
        "Selected decorator",
        extra={"operation": operation, "decorator": decorator.__name__},
    )
    return decorator


def catch(
    inner: Any,
    exception_type: type[Exception],
    handler: Callable[[Any], Any],
) -> Any:
    """Wrap ``inner`` in the exception handler matching its contract."""
    decorator = _select(_EXCEPTION_HANDLERS, inner, "catch")
    return decorator(inner, exception_type, handler)


def with_tap(
    inner: Any,
    tap: Any,
    logger: LoggerProtocol | None = None,
    mode: TapMode | str | None = None,
) -> Any:
    """
    Mirror the writes made to ``inner`` onto ``tap``.

    Query services have nothing to mirror and are rejected.

    Args:
        inner: The primary command service, repository or unit of work
        tap: The secondary instance, same contract and execution model
        logger: Receives tap failures
        mode: Tap mode; None uses ``DataTapSettings.tap_mode``

    Returns:
        The matching tap decorator

    Raises:
        UnsupportedContractError: If ``inner`` is a query service
        InvalidDependencyError: If ``tap`` does not use the execution model of
            ``inner``
    """
    decorator = _select(_TAPS, inner, "with_tap")
    if mode is None:
        mode = get_settings().tap_mode
    return decorator(inner, tap, logger, mode)


def to_async(inner: Any) -> Any:
    """Expose a blocking instance through the async contracts.

    An instance that is already async is returned unchanged.
    """
    if inner is None:
        raise MissingDependencyError("inner", "to_async")
    contract, is_async = detect_contract(inner)
    if is_async:
        return inner
    return _ASYNC_ADAPTERS[contract](inner)


def to_sync(inner: Any) -> Any:
    """Expose an async instance through the blocking contracts.

    An instance that is already blocking is returned unchanged.
    """
    if inner is None:
        raise MissingDependencyError("inner", "to_sync")
    contract, is_async = detect_contract(inner)
    if not is_async:
        return inner
    return _SYNC_ADAPTERS[contract](inner)


def join(query: Any, command: Any) -> ComposedRepository | ComposedAsyncRepository:
    """Join a query service and a command service into one repository."""
    if query is None:
        raise MissingDependencyError("query", "join")
    if is_async_callable(getattr(query, "get_all", None)):
        return ComposedAsyncRepository(query, command)
    return ComposedRepository(query, command)
