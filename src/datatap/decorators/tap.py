# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: datatap
"""
Tap decorators: mirror every write made to a primary instance onto a
secondary ("tap") instance of the same contract.

Writes are mirrored as follows:

- ``add``, ``add_or_update``, ``update`` -> ``tap.add_or_update``
- ``remove`` / ``remove_by_id`` -> ``tap.remove`` / ``tap.remove_by_id``
- ``try_add`` / ``try_update`` -> ``tap.add_or_update``; in sequential mode
  only when the primary returned True
- ``try_remove`` / ``try_remove_by_id`` -> ``tap.remove`` /
  ``tap.remove_by_id`` whatever the primary returned, so the tap converges on
  the primary's end state
- ``commit`` -> ``tap.commit``

Reads on a repository tap go to the primary only.

In ``TapMode.SEQUENTIAL`` the tap is called after the primary succeeds and is
never called when the primary fails. In ``TapMode.CONCURRENT`` both calls are
started together and both are waited for; there is no ordering between their
side effects, so the two stores may diverge when the primary fails. Blocking
taps run the tap call in the background through ``execution.submit``, which
never waits on a worker the caller itself occupies.

Tap failures never reach the caller. Each one is logged once at WARNING with
the exception attached when a logger was supplied, and dropped otherwise.
The caller sees either the primary's result or the primary's own exception.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from concurrent.futures import Future
from typing import Any, TypeVar

from datatap.config import TapMode
from datatap.decorators.base import (
    AsyncCommandDecorator,
    AsyncQueryDecorator,
    AsyncUnitOfWorkDecorator,
    CommandDecorator,
    Decorator,
    QueryDecorator,
    UnitOfWorkDecorator,
)
from datatap.decorators.exception_handler import (
    AsyncCommandExceptionHandler,
    AsyncUnitOfWorkExceptionHandler,
    CommandExceptionHandler,
    UnitOfWorkExceptionHandler,
)
from datatap.errors import InvalidDependencyError, require
from datatap.execution import is_async_callable, submit
from datatap.logging import LoggerProtocol
from datatap.protocols import (
    AsyncCommandProtocol,
    AsyncRepositoryProtocol,
    AsyncUnitOfWorkProtocol,
    CommandProtocol,
    RepositoryProtocol,
    UnitOfWorkProtocol,
)

TEntity = TypeVar("TEntity")
TId = TypeVar("TId")
T = TypeVar("T")


class _TapPolicy:
    """Mode, logger and failure isolation shared by every tap decorator."""

    contract_name = "command service"
    # Method the tap must expose; its kind has to match the decorator.
    tap_method = "add_or_update"
    tap_is_async = False

    _tap: Any
    _guarded_tap: Any
    _logger: LoggerProtocol | None
    _mode: TapMode

    def _init_tap(
        self,
        tap: Any,
        logger: LoggerProtocol | None,
        mode: TapMode | str,
        guard: Callable[[Any, type[Exception], Callable[[Exception], bool]], Any],
    ) -> None:
        self._tap = require(tap, "tap", self)
        method = getattr(tap, self.tap_method, None)
        if not callable(method) or is_async_callable(method) is not self.tap_is_async:
            kind = "an async" if self.tap_is_async else "a blocking"
            raise InvalidDependencyError(
                "tap", type(self).__name__, f"tap must be {kind} {self.contract_name}"
            )
        self._logger = logger
        try:
            self._mode = TapMode(mode)
        except ValueError:
            raise InvalidDependencyError(
                "mode", type(self).__name__, f"unknown tap mode {mode!r}"
            ) from None
        self._guarded_tap = guard(tap, Exception, self._isolate)

    @property
    def tap(self) -> Any:
        """The secondary instance receiving mirrored writes."""
        return self._tap

    @property
    def logger(self) -> LoggerProtocol | None:
        return self._logger

    @property
    def mode(self) -> TapMode:
        return self._mode

    def _isolate(self, exc: Exception) -> bool:
        if self._logger is not None:
            self._logger.warning(
                "An exception occurred in the tap %s.",
                self.contract_name,
                exc_info=exc,
            )
        return True


class _SyncTapPolicy(_TapPolicy):
    def _mirrored(
        self,
        primary: Callable[[], T],
        mirror: Callable[[], object],
        when: Callable[[T], bool] | None = None,
    ) -> T:
        if self._mode is TapMode.CONCURRENT:
            pending: Future[object] = submit(mirror)
            try:
                return primary()
            finally:
                pending.result()

        result = primary()
        if when is None or when(result):
            mirror()
        return result


class _AsyncTapPolicy(_TapPolicy):
    tap_is_async = True

    async def _mirrored(
        self,
        primary: Awaitable[T],
        mirror: Callable[[], Awaitable[object]],
        when: Callable[[T], bool] | None = None,
    ) -> T:
        if self._mode is TapMode.CONCURRENT:
            primary_task = asyncio.ensure_future(primary)
            mirror_task = asyncio.ensure_future(mirror())
            await asyncio.wait((primary_task, mirror_task))
            mirror_task.result()
            return primary_task.result()

        result = await primary
        if when is None or when(result):
            await mirror()
        return result


def _succeeded(result: bool) -> bool:
    return bool(result)


class CommandTap(CommandDecorator[TEntity, TId], _SyncTapPolicy):
    """Mirrors every write on a command service to a tap command service."""

    def __init__(
        self,
        inner: CommandProtocol[TEntity, TId],
        tap: CommandProtocol[TEntity, TId],
        logger: LoggerProtocol | None = None,
        mode: TapMode | str = TapMode.SEQUENTIAL,
    ) -> None:
        """
        Args:
            inner: The primary command service
            tap: The secondary command service receiving mirrored writes
            logger: Receives one warning per tap failure; None drops them silently
            mode: Sequential (tap after primary) or concurrent (both at once)
        """
        Decorator.__init__(self, inner)
        self._init_tap(tap, logger, mode, CommandExceptionHandler)

    def add(self, entity: TEntity) -> None:
        self._mirrored(
            lambda: self._inner.add(entity),
            lambda: self._guarded_tap.add_or_update(entity),
        )

    def add_or_update(self, entity: TEntity) -> None:
        self._mirrored(
            lambda: self._inner.add_or_update(entity),
            lambda: self._guarded_tap.add_or_update(entity),
        )

    def update(self, entity: TEntity) -> None:
        self._mirrored(
            lambda: self._inner.update(entity),
            lambda: self._guarded_tap.add_or_update(entity),
        )

    def remove(self, entity: TEntity) -> None:
        self._mirrored(
            lambda: self._inner.remove(entity),
            lambda: self._guarded_tap.remove(entity),
        )

    def remove_by_id(self, id: TId) -> None:
        self._mirrored(
            lambda: self._inner.remove_by_id(id),
            lambda: self._guarded_tap.remove_by_id(id),
        )

    def try_add(self, entity: TEntity) -> bool:
        return self._mirrored(
            lambda: self._inner.try_add(entity),
            lambda: self._guarded_tap.add_or_update(entity),
            when=_succeeded,
        )

    def try_update(self, entity: TEntity) -> bool:
        return self._mirrored(
            lambda: self._inner.try_update(entity),
            lambda: self._guarded_tap.add_or_update(entity),
            when=_succeeded,
        )

    def try_remove(self, entity: TEntity) -> bool:
        return self._mirrored(
            lambda: self._inner.try_remove(entity),
            lambda: self._guarded_tap.remove(entity),
        )

    def try_remove_by_id(self, id: TId) -> bool:
        return self._mirrored(
            lambda: self._inner.try_remove_by_id(id),
            lambda: self._guarded_tap.remove_by_id(id),
        )


class RepositoryTap(CommandTap[TEntity, TId], QueryDecorator[TEntity, TId]):
    """Mirrors every write on a repository to a tap repository.

    Reads are served by the primary repository alone.
    """

    contract_name = "repository"

    def __init__(
        self,
        inner: RepositoryProtocol[TEntity, TId],
        tap: RepositoryProtocol[TEntity, TId],
        logger: LoggerProtocol | None = None,
        mode: TapMode | str = TapMode.SEQUENTIAL,
    ) -> None:
        super().__init__(inner, tap, logger, mode)


class UnitOfWorkTap(UnitOfWorkDecorator, _SyncTapPolicy):
    """Commits a tap unit of work whenever the primary one is committed."""

    contract_name = "unit of work"
    tap_method = "commit"

    def __init__(
        self,
        inner: UnitOfWorkProtocol,
        tap: UnitOfWorkProtocol,
        logger: LoggerProtocol | None = None,
        mode: TapMode | str = TapMode.SEQUENTIAL,
    ) -> None:
        Decorator.__init__(self, inner)
        self._init_tap(tap, logger, mode, UnitOfWorkExceptionHandler)

    def commit(self) -> None:
        self._mirrored(self._inner.commit, self._guarded_tap.commit)


class AsyncCommandTap(AsyncCommandDecorator[TEntity, TId], _AsyncTapPolicy):
    """Mirrors every write on an async command service to a tap command service."""

    def __init__(
        self,
        inner: AsyncCommandProtocol[TEntity, TId],
        tap: AsyncCommandProtocol[TEntity, TId],
        logger: LoggerProtocol | None = None,
        mode: TapMode | str = TapMode.SEQUENTIAL,
    ) -> None:
        """
        Args:
            inner: The primary command service
            tap: The secondary command service receiving mirrored writes
            logger: Receives one warning per tap failure; None drops them silently
            mode: Sequential (tap after primary) or concurrent (both at once)
        """
        Decorator.__init__(self, inner)
        self._init_tap(tap, logger, mode, AsyncCommandExceptionHandler)

    async def add(self, entity: TEntity) -> None:
        await self._mirrored(
            self._inner.add(entity),
            lambda: self._guarded_tap.add_or_update(entity),
        )

    async def add_or_update(self, entity: TEntity) -> None:
        await self._mirrored(
            self._inner.add_or_update(entity),
            lambda: self._guarded_tap.add_or_update(entity),
        )

    async def update(self, entity: TEntity) -> None:
        await self._mirrored(
            self._inner.update(entity),
            lambda: self._guarded_tap.add_or_update(entity),
        )

    async def remove(self, entity: TEntity) -> None:
        await self._mirrored(
            self._inner.remove(entity),
            lambda: self._guarded_tap.remove(entity),
        )

    async def remove_by_id(self, id: TId) -> None:
        await self._mirrored(
            self._inner.remove_by_id(id),
            lambda: self._guarded_tap.remove_by_id(id),
        )

    async def try_add(self, entity: TEntity) -> bool:
        return await self._mirrored(
            self._inner.try_add(entity),
            lambda: self._guarded_tap.add_or_update(entity),
            when=_succeeded,
        )

    async def try_update(self, entity: TEntity) -> bool:
        return await self._mirrored(
            self._inner.try_update(entity),
            lambda: self._guarded_tap.add_or_update(entity),
            when=_succeeded,
        )

    async def try_remove(self, entity: TEntity) -> bool:
        return await self._mirrored(
            self._inner.try_remove(entity),
            lambda: self._guarded_tap.remove(entity),
        )

    async def try_remove_by_id(self, id: TId) -> bool:
        return await self._mirrored(
            self._inner.try_remove_by_id(id),
            lambda: self._guarded_tap.remove_by_id(id),
        )


class AsyncRepositoryTap(
    AsyncCommandTap[TEntity, TId], AsyncQueryDecorator[TEntity, TId]
):
    """Mirrors every write on an async repository to a tap repository.

    Reads are served by the primary repository alone.
    """

    contract_name = "repository"

    def __init__(
        self,
        inner: AsyncRepositoryProtocol[TEntity, TId],
        tap: AsyncRepositoryProtocol[TEntity, TId],
        logger: LoggerProtocol | None = None,
        mode: TapMode | str = TapMode.SEQUENTIAL,
    ) -> None:
        super().__init__(inner, tap, logger, mode)


class AsyncUnitOfWorkTap(AsyncUnitOfWorkDecorator, _AsyncTapPolicy):
    """Commits a tap unit of work whenever the primary one is committed."""

    contract_name = "unit of work"
    tap_method = "commit"

    def __init__(
        self,
        inner: AsyncUnitOfWorkProtocol,
        tap: AsyncUnitOfWorkProtocol,
        logger: LoggerProtocol | None = None,
        mode: TapMode | str = TapMode.SEQUENTIAL,
    ) -> None:
        Decorator.__init__(self, inner)
        self._init_tap(tap, logger, mode, AsyncUnitOfWorkExceptionHandler)

    async def commit(self) -> None:
        await self._mirrored(self._inner.commit(), self._guarded_tap.commit)
