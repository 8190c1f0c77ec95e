# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Forwarding decorator bases.

Each base holds the wrapped ("inner") instance and forwards every operation
to it unchanged. Concrete decorators override only the operations they
change. Repository bases combine the query and command bases.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from datatap.errors import require
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
TInner = TypeVar("TInner")


class Decorator(Generic[TInner]):
    """Owns the wrapped instance; construction fails if it is missing."""

    def __init__(self, inner: TInner) -> None:
        self._inner: TInner = require(inner, "inner", self)

    @property
    def inner(self) -> TInner:
        """The wrapped instance."""
        return self._inner

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._inner!r})"


class QueryDecorator(Decorator[Any], Generic[TEntity, TId]):
    """Forwards every query operation to the inner query service."""

    _inner: QueryProtocol[TEntity, TId]

    def __init__(self, inner: QueryProtocol[TEntity, TId]) -> None:
        super().__init__(inner)

    def get_count(self) -> int:
        return self._inner.get_count()

    def get_all(self) -> Iterable[TEntity]:
        return self._inner.get_all()

    def get_by_id(self, id: TId) -> TEntity:
        return self._inner.get_by_id(id)

    def try_get_by_id(self, id: TId) -> TEntity | None:
        return self._inner.try_get_by_id(id)


class CommandDecorator(Decorator[Any], Generic[TEntity, TId]):
    """Forwards every command operation to the inner command service."""

    _inner: CommandProtocol[TEntity, TId]

    def __init__(self, inner: CommandProtocol[TEntity, TId]) -> None:
        super().__init__(inner)

    def add(self, entity: TEntity) -> None:
        self._inner.add(entity)

    def add_or_update(self, entity: TEntity) -> None:
        self._inner.add_or_update(entity)

    def update(self, entity: TEntity) -> None:
        self._inner.update(entity)

    def remove(self, entity: TEntity) -> None:
        self._inner.remove(entity)

    def remove_by_id(self, id: TId) -> None:
        self._inner.remove_by_id(id)

    def try_add(self, entity: TEntity) -> bool:
        return self._inner.try_add(entity)

    def try_update(self, entity: TEntity) -> bool:
        return self._inner.try_update(entity)

    def try_remove(self, entity: TEntity) -> bool:
        return self._inner.try_remove(entity)

    def try_remove_by_id(self, id: TId) -> bool:
        return self._inner.try_remove_by_id(id)


class RepositoryDecorator(
    QueryDecorator[TEntity, TId], CommandDecorator[TEntity, TId]
):
    """Forwards every repository operation to the inner repository."""

    _inner: RepositoryProtocol[TEntity, TId]

    def __init__(self, inner: RepositoryProtocol[TEntity, TId]) -> None:
        Decorator.__init__(self, inner)


class UnitOfWorkDecorator(Decorator[UnitOfWorkProtocol]):
    """Forwards commit to the inner unit of work."""

    def commit(self) -> None:
        self._inner.commit()


class AsyncQueryDecorator(Decorator[Any], Generic[TEntity, TId]):
    """Forwards every async query operation to the inner query service."""

    _inner: AsyncQueryProtocol[TEntity, TId]

    def __init__(self, inner: AsyncQueryProtocol[TEntity, TId]) -> None:
        super().__init__(inner)

    async def get_count(self) -> int:
        return await self._inner.get_count()

    async def get_all(self) -> Iterable[TEntity]:
        return await self._inner.get_all()

    async def get_by_id(self, id: TId) -> TEntity:
        return await self._inner.get_by_id(id)

    async def try_get_by_id(self, id: TId) -> TEntity | None:
        return await self._inner.try_get_by_id(id)


class AsyncCommandDecorator(Decorator[Any], Generic[TEntity, TId]):
    """Forwards every async command operation to the inner command service."""

    _inner: AsyncCommandProtocol[TEntity, TId]

    def __init__(self, inner: AsyncCommandProtocol[TEntity, TId]) -> None:
        super().__init__(inner)

    async def add(self, entity: TEntity) -> None:
        await self._inner.add(entity)

    async def add_or_update(self, entity: TEntity) -> None:
        await self._inner.add_or_update(entity)

    async def update(self, entity: TEntity) -> None:
        await self._inner.update(entity)

    async def remove(self, entity: TEntity) -> None:
        await self._inner.remove(entity)

    async def remove_by_id(self, id: TId) -> None:
        await self._inner.remove_by_id(id)

    async def try_add(self, entity: TEntity) -> bool:
        return await self._inner.try_add(entity)

    async def try_update(self, entity: TEntity) -> bool:
        return await self._inner.try_update(entity)

    async def try_remove(self, entity: TEntity) -> bool:
        return await self._inner.try_remove(entity)

    async def try_remove_by_id(self, id: TId) -> bool:
        return await self._inner.try_remove_by_id(id)


class AsyncRepositoryDecorator(
    AsyncQueryDecorator[TEntity, TId], AsyncCommandDecorator[TEntity, TId]
):
    """Forwards every async repository operation to the inner repository."""

    _inner: AsyncRepositoryProtocol[TEntity, TId]

    def __init__(self, inner: AsyncRepositoryProtocol[TEntity, TId]) -> None:
        Decorator.__init__(self, inner)


class AsyncUnitOfWorkDecorator(Decorator[AsyncUnitOfWorkProtocol]):
    """Forwards commit to the inner async unit of work."""

    async def commit(self) -> None:
        await self._inner.commit()
