# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Entity and identity protocols.

datatap never inspects entities beyond their ``id``; any object exposing one
(dataclass, Pydantic model, ORM row) can flow through the decorators.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar


class IdentityProtocol(Protocol):
    """An identity value: comparable for equality and totally ordered."""

    def __eq__(self, other: Any, /) -> bool: ...

    def __lt__(self, other: Any, /) -> bool: ...

    def __hash__(self) -> int: ...


TId = TypeVar("TId", bound=IdentityProtocol)
TId_co = TypeVar("TId_co", bound=IdentityProtocol, covariant=True)


class EntityProtocol(Protocol[TId_co]):
    """An object exposing an identity."""

    @property
    def id(self) -> TId_co: ...


TEntity = TypeVar("TEntity", bound=EntityProtocol[Any])
