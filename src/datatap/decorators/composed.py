# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Repository façades joining a query service and a command service.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic, TypeVar

from datatap.errors import require
from datatap.protocols import (
    AsyncCommandProtocol,
    AsyncQueryProtocol,
    CommandProtocol,
    QueryProtocol,
)

TEntity = TypeVar("TEntity")
TId = TypeVar("TId")


class ComposedRepository(Generic[TEntity, TId]):
    """Reads go to ``query``, writes go to ``command``."""

    def __init__(
        self,
        query: QueryProtocol[TEntity, TId],
        command: CommandProtocol[TEntity, TId],
    ) -> None:
        self._query = require(query, "query", self)
        self._command = require(command, "command", self)

    @property
    def query(self) -> QueryProtocol[TEntity, TId]:
        return self._query

    @property
    def command(self) -> CommandProtocol[TEntity, TId]:
        return self._command

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._query!r}, {self._command!r})"

    def get_count(self) -> int:
        return self._query.get_count()

    def get_all(self) -> Iterable[TEntity]:
        return self._query.get_all()

    def get_by_id(self, id: TId) -> TEntity:
        return self._query.get_by_id(id)

    def try_get_by_id(self, id: TId) -> TEntity | None:
        return self._query.try_get_by_id(id)

    def add(self, entity: TEntity) -> None:
        self._command.add(entity)

    def add_or_update(self, entity: TEntity) -> None:
        self._command.add_or_update(entity)

    def update(self, entity: TEntity) -> None:
        self._command.update(entity)

    def remove(self, entity: TEntity) -> None:
        self._command.remove(entity)

    def remove_by_id(self, id: TId) -> None:
        self._command.remove_by_id(id)

    def try_add(self, entity: TEntity) -> bool:
        return self._command.try_add(entity)

    def try_update(self, entity: TEntity) -> bool:
        return self._command.try_update(entity)

    def try_remove(self, entity: TEntity) -> bool:
        return self._command.try_remove(entity)

    def try_remove_by_id(self, id: TId) -> bool:
        return self._command.try_remove_by_id(id)


class ComposedAsyncRepository(Generic[TEntity, TId]):
    """Async reads go to ``query``, async writes go to ``command``."""

    def __init__(
        self,
        query: AsyncQueryProtocol[TEntity, TId],
        command: AsyncCommandProtocol[TEntity, TId],
    ) -> None:
        self._query = require(query, "query", self)
        self._command = require(command, "command", self)

    @property
    def query(self) -> AsyncQueryProtocol[TEntity, TId]:
        return self._query

    @property
    def command(self) -> AsyncCommandProtocol[TEntity, TId]:
        return self._command

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._query!r}, {self._command!r})"

    async def get_count(self) -> int:
        return await self._query.get_count()

    async def get_all(self) -> Iterable[TEntity]:
        return await self._query.get_all()

    async def get_by_id(self, id: TId) -> TEntity:
        return await self._query.get_by_id(id)

    async def try_get_by_id(self, id: TId) -> TEntity | None:
        return await self._query.try_get_by_id(id)

    async def add(self, entity: TEntity) -> None:
        await self._command.add(entity)

    async def add_or_update(self, entity: TEntity) -> None:
        await self._command.add_or_update(entity)

    async def update(self, entity: TEntity) -> None:
        await self._command.update(entity)

    async def remove(self, entity: TEntity) -> None:
        await self._command.remove(entity)

    async def remove_by_id(self, id: TId) -> None:
        await self._command.remove_by_id(id)

    async def try_add(self, entity: TEntity) -> bool:
        return await self._command.try_add(entity)

    async def try_update(self, entity: TEntity) -> bool:
        return await self._command.try_update(entity)

    async def try_remove(self, entity: TEntity) -> bool:
        return await self._command.try_remove(entity)

    async def try_remove_by_id(self, id: TId) -> bool:
        return await self._command.try_remove_by_id(id)
