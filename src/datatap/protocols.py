# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Data access contracts.

Each contract comes in a blocking and an async flavour with identical method
names. A repository is the union of a query service and a command service.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, TypeVar

from datatap.entity import IdentityProtocol

TEntity = TypeVar("TEntity")
TId = TypeVar("TId", bound=IdentityProtocol, contravariant=True)


class QueryProtocol(Protocol[TEntity, TId]):
    """Read side of a data store."""

    def get_count(self) -> int:
        """Return the number of entities in the store."""
        ...

    def get_all(self) -> Iterable[TEntity]:
        """Return every entity in the store."""
        ...

    def get_by_id(self, id: TId) -> TEntity:
        """Return the entity with the given identity.

        Backends typically raise when the entity does not exist.
        """
        ...

    def try_get_by_id(self, id: TId) -> TEntity | None:
        """Return the entity with the given identity, or None if absent."""
        ...


class CommandProtocol(Protocol[TEntity, TId]):
    """Write side of a data store."""

    def add(self, entity: TEntity) -> None:
        """Add a new entity; backends typically raise if it already exists."""
        ...

    def add_or_update(self, entity: TEntity) -> None:
        """Add the entity, or replace the existing one with the same identity."""
        ...

    def update(self, entity: TEntity) -> None:
        """Replace an existing entity; backends typically raise if it is absent."""
        ...

    def remove(self, entity: TEntity) -> None:
        """Remove the given entity."""
        ...

    def remove_by_id(self, id: TId) -> None:
        """Remove the entity with the given identity."""
        ...

    def try_add(self, entity: TEntity) -> bool:
        """Add a new entity; return False instead of raising if it exists."""
        ...

    def try_update(self, entity: TEntity) -> bool:
        """Replace an existing entity; return False if it is absent."""
        ...

    def try_remove(self, entity: TEntity) -> bool:
        """Remove the given entity; return False if it was absent."""
        ...

    def try_remove_by_id(self, id: TId) -> bool:
        """Remove the entity with the given identity; return False if absent."""
        ...


class RepositoryProtocol(
    QueryProtocol[TEntity, TId], CommandProtocol[TEntity, TId], Protocol
):
    """Read and write access to a data store."""


class UnitOfWorkProtocol(Protocol):
    """A batch of changes committed together."""

    def commit(self) -> None:
        """Commit all pending changes."""
        ...


class AsyncQueryProtocol(Protocol[TEntity, TId]):
    """Async read side of a data store."""

    async def get_count(self) -> int: ...

    async def get_all(self) -> Iterable[TEntity]: ...

    async def get_by_id(self, id: TId) -> TEntity: ...

    async def try_get_by_id(self, id: TId) -> TEntity | None: ...


class AsyncCommandProtocol(Protocol[TEntity, TId]):
    """Async write side of a data store."""

    async def add(self, entity: TEntity) -> None: ...

    async def add_or_update(self, entity: TEntity) -> None: ...

    async def update(self, entity: TEntity) -> None: ...

    async def remove(self, entity: TEntity) -> None: ...

    async def remove_by_id(self, id: TId) -> None: ...

    async def try_add(self, entity: TEntity) -> bool: ...

    async def try_update(self, entity: TEntity) -> bool: ...

    async def try_remove(self, entity: TEntity) -> bool: ...

    async def try_remove_by_id(self, id: TId) -> bool: ...


class AsyncRepositoryProtocol(
    AsyncQueryProtocol[TEntity, TId], AsyncCommandProtocol[TEntity, TId], Protocol
):
    """Async read and write access to a data store."""


class AsyncUnitOfWorkProtocol(Protocol):
    """Async batch of changes committed together."""

    async def commit(self) -> None: ...
