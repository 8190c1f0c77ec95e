# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Exception-recovery decorators.

An exception handler intercepts exceptions of one declared type raised by the
wrapped instance and asks a predicate whether the failure is recovered:

- ``True``: the operation completes with its default result (``0`` for
  ``get_count``, ``[]`` for ``get_all``, ``None`` for lookups, ``False`` for
  ``try_*`` commands, nothing for other commands).
- ``False``: the very same exception instance is re-raised.

Exceptions of any other type pass through untouched and the predicate is not
called. The predicate is called exactly once per intercepted exception.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Generic, TypeVar

from typing_extensions import TypeAlias

from datatap.decorators.base import (
    AsyncCommandDecorator,
    AsyncQueryDecorator,
    AsyncUnitOfWorkDecorator,
    CommandDecorator,
    Decorator,
    QueryDecorator,
    UnitOfWorkDecorator,
)
from datatap.errors import InvalidDependencyError, require
from datatap.execution import is_async_callable
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

TEntity = TypeVar("TEntity")
TId = TypeVar("TId")
E = TypeVar("E", bound=Exception)

RecoveryHandler: TypeAlias = Callable[[E], bool]
AsyncRecoveryHandler: TypeAlias = Callable[[E], bool | Awaitable[bool]]


class _Recovery(Generic[E]):
    """Holds the declared exception type and the recovery predicate."""

    _exception_type: type[E]
    _handler: Callable[[E], Any]

    def _init_recovery(
        self, exception_type: type[E], handler: Callable[[E], Any], allow_async: bool
    ) -> None:
        require(exception_type, "exception_type", self)
        require(handler, "handler", self)
        if not (isinstance(exception_type, type) and issubclass(exception_type, Exception)):
            raise InvalidDependencyError(
                "exception_type",
                type(self).__name__,
                f"expected an Exception subclass, got {exception_type!r}",
            )
        if not callable(handler):
            raise InvalidDependencyError(
                "handler", type(self).__name__, "handler must be callable"
            )
        if not allow_async and is_async_callable(handler):
            raise InvalidDependencyError(
                "handler",
                type(self).__name__,
                "a blocking decorator cannot await an async handler",
            )
        self._exception_type = exception_type
        self._handler = handler

    @property
    def exception_type(self) -> type[E]:
        """The exception type this decorator intercepts."""
        return self._exception_type

    @property
    def handler(self) -> Callable[[E], Any]:
        """The recovery predicate."""
        return self._handler

    def _recovers(self, exc: E) -> bool:
        return bool(self._handler(exc))

    async def _recovers_async(self, exc: E) -> bool:
        handled = self._handler(exc)
        if inspect.isawaitable(handled):
            handled = await handled
        return bool(handled)


class QueryExceptionHandler(QueryDecorator[TEntity, TId], _Recovery[E]):
    """Recovers from ``exception_type`` raised by a query service."""

    def __init__(
        self,
        inner: QueryProtocol[TEntity, TId],
        exception_type: type[E],
        handler: RecoveryHandler[E],
    ) -> None:
        """
        Args:
            inner: The query service to wrap
            exception_type: Exceptions of this type (or a subclass) are intercepted
            handler: Returns True when the exception is recovered
        """
        Decorator.__init__(self, inner)
        self._init_recovery(exception_type, handler, allow_async=False)

    def get_count(self) -> int:
        try:
            return self._inner.get_count()
        except self._exception_type as exc:
            if self._recovers(exc):
                return 0
            raise

    def get_all(self) -> Iterable[TEntity]:
        try:
            return self._inner.get_all()
        except self._exception_type as exc:
            if self._recovers(exc):
                return []
            raise

    def get_by_id(self, id: TId) -> TEntity | None:
        try:
            return self._inner.get_by_id(id)
        except self._exception_type as exc:
            if self._recovers(exc):
                return None
            raise

    def try_get_by_id(self, id: TId) -> TEntity | None:
        try:
            return self._inner.try_get_by_id(id)
        except self._exception_type as exc:
            if self._recovers(exc):
                return None
            raise


class CommandExceptionHandler(CommandDecorator[TEntity, TId], _Recovery[E]):
    """Recovers from ``exception_type`` raised by a command service."""

    def __init__(
        self,
        inner: CommandProtocol[TEntity, TId],
        exception_type: type[E],
        handler: RecoveryHandler[E],
    ) -> None:
        Decorator.__init__(self, inner)
        self._init_recovery(exception_type, handler, allow_async=False)

    def add(self, entity: TEntity) -> None:
        try:
            self._inner.add(entity)
        except self._exception_type as exc:
            if not self._recovers(exc):
                raise

    def add_or_update(self, entity: TEntity) -> None:
        try:
            self._inner.add_or_update(entity)
        except self._exception_type as exc:
            if not self._recovers(exc):
                raise

    def update(self, entity: TEntity) -> None:
        try:
            self._inner.update(entity)
        except self._exception_type as exc:
            if not self._recovers(exc):
                raise

    def remove(self, entity: TEntity) -> None:
        try:
            self._inner.remove(entity)
        except self._exception_type as exc:
            if not self._recovers(exc):
                raise

    def remove_by_id(self, id: TId) -> None:
        try:
            self._inner.remove_by_id(id)
        except self._exception_type as exc:
            if not self._recovers(exc):
                raise

    def try_add(self, entity: TEntity) -> bool:
        try:
            return self._inner.try_add(entity)
        except self._exception_type as exc:
            if self._recovers(exc):
                return False
            raise

    def try_update(self, entity: TEntity) -> bool:
        try:
            return self._inner.try_update(entity)
        except self._exception_type as exc:
            if self._recovers(exc):
                return False
            raise

    def try_remove(self, entity: TEntity) -> bool:
        try:
            return self._inner.try_remove(entity)
        except self._exception_type as exc:
            if self._recovers(exc):
                return False
            raise

    def try_remove_by_id(self, id: TId) -> bool:
        try:
            return self._inner.try_remove_by_id(id)
        except self._exception_type as exc:
            if self._recovers(exc):
                return False
            raise


class RepositoryExceptionHandler(
    QueryExceptionHandler[TEntity, TId, E], CommandExceptionHandler[TEntity, TId, E]
):
    """Recovers from ``exception_type`` raised by any repository operation."""

    def __init__(
        self,
        inner: RepositoryProtocol[TEntity, TId],
        exception_type: type[E],
        handler: RecoveryHandler[E],
    ) -> None:
        Decorator.__init__(self, inner)
        self._init_recovery(exception_type, handler, allow_async=False)


class UnitOfWorkExceptionHandler(UnitOfWorkDecorator, _Recovery[E]):
    """Recovers from ``exception_type`` raised while committing."""

    def __init__(
        self,
        inner: UnitOfWorkProtocol,
        exception_type: type[E],
        handler: RecoveryHandler[E],
    ) -> None:
        Decorator.__init__(self, inner)
        self._init_recovery(exception_type, handler, allow_async=False)

    def commit(self) -> None:
        try:
            self._inner.commit()
        except self._exception_type as exc:
            if not self._recovers(exc):
                raise


class AsyncQueryExceptionHandler(AsyncQueryDecorator[TEntity, TId], _Recovery[E]):
    """Recovers from ``exception_type`` raised by an async query service.

    The handler may be a plain function or a coroutine function.
    """

    def __init__(
        self,
        inner: AsyncQueryProtocol[TEntity, TId],
        exception_type: type[E],
        handler: AsyncRecoveryHandler[E],
    ) -> None:
        Decorator.__init__(self, inner)
        self._init_recovery(exception_type, handler, allow_async=True)

    async def get_count(self) -> int:
        try:
            return await self._inner.get_count()
        except self._exception_type as exc:
            if await self._recovers_async(exc):
                return 0
            raise

    async def get_all(self) -> Iterable[TEntity]:
        try:
            return await self._inner.get_all()
        except self._exception_type as exc:
            if await self._recovers_async(exc):
                return []
            raise

    async def get_by_id(self, id: TId) -> TEntity | None:
        try:
            return await self._inner.get_by_id(id)
        except self._exception_type as exc:
            if await self._recovers_async(exc):
                return None
            raise

    async def try_get_by_id(self, id: TId) -> TEntity | None:
        try:
            return await self._inner.try_get_by_id(id)
        except self._exception_type as exc:
            if await self._recovers_async(exc):
                return None
            raise


class AsyncCommandExceptionHandler(AsyncCommandDecorator[TEntity, TId], _Recovery[E]):
    """Recovers from ``exception_type`` raised by an async command service."""

    def __init__(
        self,
        inner: AsyncCommandProtocol[TEntity, TId],
        exception_type: type[E],
        handler: AsyncRecoveryHandler[E],
    ) -> None:
        Decorator.__init__(self, inner)
        self._init_recovery(exception_type, handler, allow_async=True)

    async def add(self, entity: TEntity) -> None:
        try:
            await self._inner.add(entity)
        except self._exception_type as exc:
            if not await self._recovers_async(exc):
                raise

    async def add_or_update(self, entity: TEntity) -> None:
        try:
            await self._inner.add_or_update(entity)
        except self._exception_type as exc:
            if not await self._recovers_async(exc):
                raise

    async def update(self, entity: TEntity) -> None:
        try:
            await self._inner.update(entity)
        except self._exception_type as exc:
            if not await self._recovers_async(exc):
                raise

    async def remove(self, entity: TEntity) -> None:
        try:
            await self._inner.remove(entity)
        except self._exception_type as exc:
            if not await self._recovers_async(exc):
                raise

    async def remove_by_id(self, id: TId) -> None:
        try:
            await self._inner.remove_by_id(id)
        except self._exception_type as exc:
            if not await self._recovers_async(exc):
                raise

    async def try_add(self, entity: TEntity) -> bool:
        try:
            return await self._inner.try_add(entity)
        except self._exception_type as exc:
            if await self._recovers_async(exc):
                return False
            raise

    async def try_update(self, entity: TEntity) -> bool:
        try:
            return await self._inner.try_update(entity)
        except self._exception_type as exc:
            if await self._recovers_async(exc):
                return False
            raise

    async def try_remove(self, entity: TEntity) -> bool:
        try:
            return await self._inner.try_remove(entity)
        except self._exception_type as exc:
            if await self._recovers_async(exc):
                return False
            raise

    async def try_remove_by_id(self, id: TId) -> bool:
        try:
            return await self._inner.try_remove_by_id(id)
        except self._exception_type as exc:
            if await self._recovers_async(exc):
                return False
            raise


class AsyncRepositoryExceptionHandler(
    AsyncQueryExceptionHandler[TEntity, TId, E],
    AsyncCommandExceptionHandler[TEntity, TId, E],
):
    """Recovers from ``exception_type`` raised by any async repository operation."""

    def __init__(
        self,
        inner: AsyncRepositoryProtocol[TEntity, TId],
        exception_type: type[E],
        handler: AsyncRecoveryHandler[E],
    ) -> None:
        Decorator.__init__(self, inner)
        self._init_recovery(exception_type, handler, allow_async=True)


class AsyncUnitOfWorkExceptionHandler(AsyncUnitOfWorkDecorator, _Recovery[E]):
    """Recovers from ``exception_type`` raised while committing asynchronously."""

    def __init__(
        self,
        inner: AsyncUnitOfWorkProtocol,
        exception_type: type[E],
        handler: AsyncRecoveryHandler[E],
    ) -> None:
        Decorator.__init__(self, inner)
        self._init_recovery(exception_type, handler, allow_async=True)

    async def commit(self) -> None:
        try:
            await self._inner.commit()
        except self._exception_type as exc:
            if not await self._recovers_async(exc):
                raise
