# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Entity factories and identity generators.

``EntityFactory`` and ``AsyncEntityFactory`` create new entities with a fresh
identity taken from a key generator. ``UUIDFactory`` and
``SequentialUUIDFactory`` are ready-made key generators.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, Generic, TypeVar

from datatap.errors import InvalidDependencyError, require
from datatap.execution import is_async_callable

T = TypeVar("T")
K = TypeVar("K")

_EPOCH = datetime(1, 1, 1, tzinfo=UTC)
_MILLISECOND = timedelta(milliseconds=1)


class EntityFactory(Generic[T, K]):
    """Creates entities of one type, each with a newly generated identity."""

    def __init__(self, entity_type: Callable[..., T], key_generator: Callable[[], K]) -> None:
        """
        Args:
            entity_type: Class (or callable) accepting an ``id`` keyword argument
            key_generator: Callable returning a new identity on every call
        """
        self._entity_type = require(entity_type, "entity_type", self)
        self._key_generator = require(key_generator, "key_generator", self)

    @property
    def key_generator(self) -> Callable[[], K]:
        return self._key_generator

    def create_new(self, **fields: Any) -> T:
        """Create a new entity.

        Args:
            **fields: Extra constructor arguments besides the identity

        Returns:
            The new entity
        """
        return self._entity_type(id=self._key_generator(), **fields)

    __call__ = create_new


class AsyncEntityFactory(Generic[T, K]):
    """Async variant of EntityFactory; the key generator may be sync or async."""

    def __init__(
        self,
        entity_type: Callable[..., T],
        key_generator: Callable[[], K | Awaitable[K]],
    ) -> None:
        self._entity_type = require(entity_type, "entity_type", self)
        self._key_generator = require(key_generator, "key_generator", self)

    async def create_new(self, **fields: Any) -> T:
        if is_async_callable(self._key_generator):
            key = await self._key_generator()
        else:
            key = self._key_generator()
        return self._entity_type(id=key, **fields)

    __call__ = create_new


class UUIDFactory:
    """Generates random (version 4) UUIDs."""

    def create_new(self) -> uuid.UUID:
        return uuid.uuid4()

    async def create_new_async(self) -> uuid.UUID:
        return uuid.uuid4()

    __call__ = create_new


class SequentialUUIDType(Enum):
    """Where the timestamp goes in a sequential UUID.

    STRING sorts by the textual form, BINARY by ``UUID.bytes_le``, and
    BINARY_END by the last six bytes of ``UUID.bytes_le`` (the order used by
    SQL Server ``uniqueidentifier`` columns).
    """

    STRING = 0
    BINARY = 1
    BINARY_END = 2


class SequentialUUIDFactory:
    """
    Generates COMB-style UUIDs: 10 random bytes plus 6 timestamp bytes.

    The timestamp is the number of milliseconds since 0001-01-01 UTC, of which
    the 6 least-significant bytes are kept. UUIDs generated in the same
    millisecond are not ordered among themselves.
    """

    NUMBER_OF_SEQUENTIAL_BYTES = 6
    _TOTAL_BYTES = 16
    _NUMBER_OF_RANDOM_BYTES = _TOTAL_BYTES - NUMBER_OF_SEQUENTIAL_BYTES
    _SEQUENTIAL_OFFSET = 2  # drop the 2 most-significant bytes of the 8-byte stamp

    def __init__(
        self,
        sequential_type: SequentialUUIDType,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Args:
            sequential_type: Where to place the timestamp bytes
            clock: Returns the current time; defaults to ``datetime.now(UTC)``.
                A naive result is read as UTC
        """
        if not isinstance(sequential_type, SequentialUUIDType):
            raise InvalidDependencyError(
                "sequential_type",
                type(self).__name__,
                f"expected SequentialUUIDType, got {sequential_type!r}",
            )
        self.sequential_type = sequential_type
        self._clock = clock or (lambda: datetime.now(UTC))

    def create_new(self) -> uuid.UUID:
        random_bytes = os.urandom(self._NUMBER_OF_RANDOM_BYTES)
        sequential_bytes = self._sequential_bytes()

        if self.sequential_type is SequentialUUIDType.BINARY_END:
            buffer = bytearray(random_bytes + sequential_bytes)
        else:
            buffer = bytearray(sequential_bytes + random_bytes)

        if self.sequential_type is SequentialUUIDType.STRING:
            # The textual form reads the first two groups little-endian.
            buffer[0:4] = buffer[0:4][::-1]
            buffer[4:6] = buffer[4:6][::-1]

        return uuid.UUID(bytes_le=bytes(buffer))

    __call__ = create_new

    def _sequential_bytes(self) -> bytes:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        milliseconds = (now - _EPOCH) // _MILLISECOND
        stamp = milliseconds.to_bytes(8, "big")
        return stamp[self._SEQUENTIAL_OFFSET :]
