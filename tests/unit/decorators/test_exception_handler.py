"""Unit tests for the exception-recovery decorators."""

from unittest.mock import AsyncMock, MagicMock, call

import pytest

from conftest import (
    FailingAsyncCommand,
    FailingCommand,
    FakeAsyncUnitOfWork,
    FakeEntity,
    InMemoryAsyncRepository,
    InMemoryRepository,
)
from datatap.decorators import (
    AsyncCommandExceptionHandler,
    AsyncQueryExceptionHandler,
    AsyncRepositoryExceptionHandler,
    AsyncUnitOfWorkExceptionHandler,
    CommandExceptionHandler,
    CommandTap,
    QueryExceptionHandler,
    RepositoryExceptionHandler,
    UnitOfWorkExceptionHandler,
)
from datatap.errors import InvalidDependencyError, MissingDependencyError


class DuplicateKeyError(Exception):
    pass


class ConnectionLostError(Exception):
    pass


class TestQueryExceptionHandler:
    """Recovery on the read side."""

    @pytest.mark.parametrize(
        ("method", "args", "default"),
        [
            ("get_count", (), 0),
            ("get_all", (), []),
            ("get_by_id", (1,), None),
            ("try_get_by_id", (1,), None),
        ],
    )
    def test_recovered_read_returns_default(self, method, args, default):
        error = ConnectionLostError("gone")
        inner = MagicMock()
        getattr(inner, method).side_effect = error
        handler = MagicMock(return_value=True)

        decorator = QueryExceptionHandler(inner, ConnectionLostError, handler)

        assert getattr(decorator, method)(*args) == default
        handler.assert_called_once_with(error)

    def test_declined_read_reraises_same_instance(self):
        error = ConnectionLostError("gone")
        inner = MagicMock()
        inner.get_all.side_effect = error
        handler = MagicMock(return_value=False)

        decorator = QueryExceptionHandler(inner, ConnectionLostError, handler)

        with pytest.raises(ConnectionLostError) as exc_info:
            decorator.get_all()
        assert exc_info.value is error
        handler.assert_called_once_with(error)

    def test_other_exception_types_bypass_handler(self):
        error = KeyError(7)
        inner = MagicMock()
        inner.get_by_id.side_effect = error
        handler = MagicMock(return_value=True)

        decorator = QueryExceptionHandler(inner, ConnectionLostError, handler)

        with pytest.raises(KeyError) as exc_info:
            decorator.get_by_id(7)
        assert exc_info.value is error
        handler.assert_not_called()

    def test_subclasses_of_declared_type_are_intercepted(self):
        class ReplicaLostError(ConnectionLostError):
            pass

        inner = MagicMock()
        inner.get_count.side_effect = ReplicaLostError()
        handler = MagicMock(return_value=True)

        decorator = QueryExceptionHandler(inner, ConnectionLostError, handler)

        assert decorator.get_count() == 0
        handler.assert_called_once()

    def test_success_passes_result_through(self):
        entity = FakeEntity(id=3, name="three")
        handler = MagicMock()

        decorator = QueryExceptionHandler(InMemoryRepository(entity), Exception, handler)

        assert decorator.get_by_id(3) is entity
        assert decorator.get_count() == 1
        handler.assert_not_called()


class TestCommandExceptionHandler:
    """Recovery on the write side."""

    @pytest.mark.parametrize(
        "method", ["add", "add_or_update", "update", "remove", "remove_by_id"]
    )
    def test_recovered_write_returns_normally(self, method, entity):
        error = DuplicateKeyError("dup")
        inner = FailingCommand(error)
        handler = MagicMock(return_value=True)
        argument = entity.id if method.endswith("by_id") else entity

        decorator = CommandExceptionHandler(inner, DuplicateKeyError, handler)

        assert getattr(decorator, method)(argument) is None
        handler.assert_called_once_with(error)
        assert inner.calls == [method]

    @pytest.mark.parametrize(
        "method", ["try_add", "try_update", "try_remove", "try_remove_by_id"]
    )
    def test_recovered_try_write_returns_false(self, method, entity):
        inner = FailingCommand(DuplicateKeyError())
        argument = entity.id if method.endswith("by_id") else entity

        decorator = CommandExceptionHandler(inner, DuplicateKeyError, lambda exc: True)

        assert getattr(decorator, method)(argument) is False

    def test_declined_write_reraises_same_instance(self, entity):
        error = DuplicateKeyError("dup")
        handler = MagicMock(return_value=False)

        decorator = CommandExceptionHandler(FailingCommand(error), DuplicateKeyError, handler)

        with pytest.raises(DuplicateKeyError) as exc_info:
            decorator.add(entity)
        assert exc_info.value is error
        handler.assert_called_once_with(error)

    def test_try_write_result_is_not_altered(self, entity):
        repository = InMemoryRepository(entity)

        decorator = CommandExceptionHandler(repository, Exception, lambda exc: True)

        assert decorator.try_add(entity) is False
        assert decorator.try_remove(entity) is True

    def test_duplicate_add_recovered_outside_tap_never_reaches_tap(self, entity):
        inner = InMemoryRepository(entity)
        inner.add = MagicMock(side_effect=DuplicateKeyError("duplicate key"))
        tap = MagicMock()

        decorator = CommandExceptionHandler(
            CommandTap(inner, tap), DuplicateKeyError, lambda exc: True
        )

        decorator.add(entity)

        tap.add_or_update.assert_not_called()


class TestRepositoryExceptionHandler:
    def test_covers_reads_and_writes(self, entity):
        error = ConnectionLostError()
        inner = MagicMock()
        inner.get_all.side_effect = error
        inner.try_update.side_effect = error
        handler = MagicMock(return_value=True)

        decorator = RepositoryExceptionHandler(inner, ConnectionLostError, handler)

        assert decorator.get_all() == []
        assert decorator.try_update(entity) is False
        assert handler.call_args_list == [call(error), call(error)]

    def test_forwards_on_success(self, entity):
        repository = InMemoryRepository()

        decorator = RepositoryExceptionHandler(repository, Exception, lambda exc: False)
        decorator.add(entity)

        assert decorator.try_get_by_id(entity.id) is entity
        assert repository.calls == [("add", entity), ("try_get_by_id", entity.id)]


class TestUnitOfWorkExceptionHandler:
    def test_recovered_commit(self):
        inner = MagicMock()
        inner.commit.side_effect = ConnectionLostError()

        decorator = UnitOfWorkExceptionHandler(inner, ConnectionLostError, lambda exc: True)

        decorator.commit()
        inner.commit.assert_called_once_with()

    def test_declined_commit(self):
        error = ConnectionLostError()
        inner = MagicMock()
        inner.commit.side_effect = error

        decorator = UnitOfWorkExceptionHandler(inner, ConnectionLostError, lambda exc: False)

        with pytest.raises(ConnectionLostError) as exc_info:
            decorator.commit()
        assert exc_info.value is error


class TestExceptionHandlerConstruction:
    def test_missing_inner(self):
        with pytest.raises(MissingDependencyError) as exc_info:
            QueryExceptionHandler(None, Exception, lambda exc: True)
        assert exc_info.value.dependency == "inner"
        assert exc_info.value.component == "QueryExceptionHandler"

    def test_missing_handler(self):
        with pytest.raises(MissingDependencyError) as exc_info:
            CommandExceptionHandler(MagicMock(), Exception, None)
        assert exc_info.value.dependency == "handler"

    def test_missing_exception_type(self):
        with pytest.raises(MissingDependencyError):
            RepositoryExceptionHandler(MagicMock(), None, lambda exc: True)

    @pytest.mark.parametrize("exception_type", [str, KeyboardInterrupt, "ValueError"])
    def test_exception_type_must_be_exception_subclass(self, exception_type):
        with pytest.raises(InvalidDependencyError):
            QueryExceptionHandler(MagicMock(), exception_type, lambda exc: True)

    def test_blocking_decorator_rejects_async_handler(self):
        async def handler(exc: Exception) -> bool:
            return True

        with pytest.raises(InvalidDependencyError):
            UnitOfWorkExceptionHandler(MagicMock(), Exception, handler)

    def test_exposes_configuration(self):
        handler = MagicMock()
        inner = MagicMock()

        decorator = CommandExceptionHandler(inner, ValueError, handler)

        assert decorator.inner is inner
        assert decorator.exception_type is ValueError
        assert decorator.handler is handler


class TestAsyncExceptionHandlers:
    """Recovery for the async contracts."""

    async def test_recovered_async_read_returns_default(self):
        error = ConnectionLostError()
        inner = AsyncMock()
        inner.get_count.side_effect = error
        inner.get_all.side_effect = error
        handler = MagicMock(return_value=True)

        decorator = AsyncQueryExceptionHandler(inner, ConnectionLostError, handler)

        assert await decorator.get_count() == 0
        assert await decorator.get_all() == []
        assert handler.call_count == 2

    async def test_async_predicate_awaited_exactly_once(self, entity):
        error = DuplicateKeyError()
        predicate = AsyncMock(return_value=True)

        decorator = AsyncCommandExceptionHandler(
            FailingAsyncCommand(error), DuplicateKeyError, predicate
        )

        assert await decorator.try_add(entity) is False
        predicate.assert_awaited_once_with(error)

    async def test_declined_async_write_reraises_same_instance(self, entity):
        error = DuplicateKeyError()

        async def decline(exc: Exception) -> bool:
            return False

        decorator = AsyncCommandExceptionHandler(
            FailingAsyncCommand(error), DuplicateKeyError, decline
        )

        with pytest.raises(DuplicateKeyError) as exc_info:
            await decorator.remove(entity)
        assert exc_info.value is error

    async def test_other_exception_types_bypass_async_handler(self):
        handler = AsyncMock(return_value=True)

        decorator = AsyncRepositoryExceptionHandler(
            InMemoryAsyncRepository(), DuplicateKeyError, handler
        )

        with pytest.raises(KeyError) as exc_info:
            await decorator.get_by_id(1)
        assert exc_info.value.args == (1,)
        handler.assert_not_awaited()

    async def test_async_repository_forwards_on_success(self, entity):
        repository = InMemoryAsyncRepository()

        decorator = AsyncRepositoryExceptionHandler(repository, Exception, lambda exc: True)

        assert await decorator.try_add(entity) is True
        assert await decorator.get_count() == 1
        assert await decorator.get_by_id(entity.id) is entity

    async def test_async_unit_of_work(self):
        unit_of_work = FakeAsyncUnitOfWork()

        decorator = AsyncUnitOfWorkExceptionHandler(unit_of_work, Exception, lambda exc: True)
        await decorator.commit()

        assert unit_of_work.commits == 1
