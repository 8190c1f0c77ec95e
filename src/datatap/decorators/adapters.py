# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Execution-model adapters.

``Async*Adapter`` classes expose a blocking backend through the async
contracts; every call runs on the shared worker executor so the event loop
stays responsive. ``Sync*Adapter`` classes expose an async backend through the
blocking contracts; every call is driven to completion by
:func:`datatap.execution.run_synchronously`.

Results and exceptions cross the bridge unchanged, so
``SyncRepositoryAdapter(AsyncRepositoryAdapter(backend))`` behaves exactly
like ``backend``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Generic, TypeVar

from datatap.decorators.base import Decorator
from datatap.execution import run_in_worker, run_synchronously
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


class AsyncQueryAdapter(Decorator[QueryProtocol], Generic[TEntity, TId]):
    """Async query service backed by a blocking one."""

    async def get_count(self) -> int:
        return await run_in_worker(self._inner.get_count)

    async def get_all(self) -> Iterable[TEntity]:
        return await run_in_worker(self._inner.get_all)

    async def get_by_id(self, id: TId) -> TEntity:
        return await run_in_worker(self._inner.get_by_id, id)

    async def try_get_by_id(self, id: TId) -> TEntity | None:
        return await run_in_worker(self._inner.try_get_by_id, id)


class AsyncCommandAdapter(Decorator[CommandProtocol], Generic[TEntity, TId]):
    """Async command service backed by a blocking one."""

    async def add(self, entity: TEntity) -> None:
        await run_in_worker(self._inner.add, entity)

    async def add_or_update(self, entity: TEntity) -> None:
        await run_in_worker(self._inner.add_or_update, entity)

    async def update(self, entity: TEntity) -> None:
        await run_in_worker(self._inner.update, entity)

    async def remove(self, entity: TEntity) -> None:
        await run_in_worker(self._inner.remove, entity)

    async def remove_by_id(self, id: TId) -> None:
        await run_in_worker(self._inner.remove_by_id, id)

    async def try_add(self, entity: TEntity) -> bool:
        return await run_in_worker(self._inner.try_add, entity)

    async def try_update(self, entity: TEntity) -> bool:
        return await run_in_worker(self._inner.try_update, entity)

    async def try_remove(self, entity: TEntity) -> bool:
        return await run_in_worker(self._inner.try_remove, entity)

    async def try_remove_by_id(self, id: TId) -> bool:
        return await run_in_worker(self._inner.try_remove_by_id, id)


class AsyncRepositoryAdapter(
    AsyncQueryAdapter[TEntity, TId], AsyncCommandAdapter[TEntity, TId]
):
    """Async repository backed by a blocking one."""

    _inner: RepositoryProtocol[TEntity, TId]


class AsyncUnitOfWorkAdapter(Decorator[UnitOfWorkProtocol]):
    """Async unit of work backed by a blocking one."""

    async def commit(self) -> None:
        await run_in_worker(self._inner.commit)


class SyncQueryAdapter(Decorator[AsyncQueryProtocol], Generic[TEntity, TId]):
    """Blocking query service backed by an async one."""

    def get_count(self) -> int:
        return run_synchronously(self._inner.get_count)

    def get_all(self) -> Iterable[TEntity]:
        return run_synchronously(self._inner.get_all)

    def get_by_id(self, id: TId) -> TEntity:
        return run_synchronously(self._inner.get_by_id, id)

    def try_get_by_id(self, id: TId) -> TEntity | None:
        return run_synchronously(self._inner.try_get_by_id, id)


class SyncCommandAdapter(Decorator[AsyncCommandProtocol], Generic[TEntity, TId]):
    """Blocking command service backed by an async one."""

    def add(self, entity: TEntity) -> None:
        run_synchronously(self._inner.add, entity)

    def add_or_update(self, entity: TEntity) -> None:
        run_synchronously(self._inner.add_or_update, entity)

    def update(self, entity: TEntity) -> None:
        run_synchronously(self._inner.update, entity)

    def remove(self, entity: TEntity) -> None:
        run_synchronously(self._inner.remove, entity)

    def remove_by_id(self, id: TId) -> None:
        run_synchronously(self._inner.remove_by_id, id)

    def try_add(self, entity: TEntity) -> bool:
        return run_synchronously(self._inner.try_add, entity)

    def try_update(self, entity: TEntity) -> bool:
        return run_synchronously(self._inner.try_update, entity)

    def try_remove(self, entity: TEntity) -> bool:
        return run_synchronously(self._inner.try_remove, entity)

    def try_remove_by_id(self, id: TId) -> bool:
        return run_synchronously(self._inner.try_remove_by_id, id)


class SyncRepositoryAdapter(
    SyncQueryAdapter[TEntity, TId], SyncCommandAdapter[TEntity, TId]
):
    """Blocking repository backed by an async one."""

    _inner: AsyncRepositoryProtocol[TEntity, TId]


class SyncUnitOfWorkAdapter(Decorator[AsyncUnitOfWorkProtocol]):
    """Blocking unit of work backed by an async one."""

    def commit(self) -> None:
        run_synchronously(self._inner.commit)
