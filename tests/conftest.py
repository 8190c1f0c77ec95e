"""Top-level pytest configuration and shared fakes for datatap."""

import asyncio
from collections.abc import Callable, Iterator

import pytest
from pydantic import BaseModel

from datatap import execution
from datatap.config import get_settings
from datatap.execution import shutdown_executor


class FakeEntity(BaseModel):
    """Entity used throughout the tests."""

    id: int
    name: str = ""


class InMemoryRepository:
    """Blocking repository keeping entities in a dict.

    Every call is recorded in ``calls`` as ``(method, argument)``.
    """

    def __init__(self, *entities: FakeEntity) -> None:
        self.store: dict[int, FakeEntity] = {entity.id: entity for entity in entities}
        self.calls: list[tuple[str, object]] = []

    def get_count(self) -> int:
        self.calls.append(("get_count", None))
        return len(self.store)

    def get_all(self) -> list[FakeEntity]:
        self.calls.append(("get_all", None))
        return [self.store[key] for key in sorted(self.store)]

    def get_by_id(self, id: int) -> FakeEntity:
        self.calls.append(("get_by_id", id))
        return self.store[id]

    def try_get_by_id(self, id: int) -> FakeEntity | None:
        self.calls.append(("try_get_by_id", id))
        return self.store.get(id)

    def add(self, entity: FakeEntity) -> None:
        self.calls.append(("add", entity))
        if entity.id in self.store:
            raise ValueError(f"entity {entity.id} already exists")
        self.store[entity.id] = entity

    def add_or_update(self, entity: FakeEntity) -> None:
        self.calls.append(("add_or_update", entity))
        self.store[entity.id] = entity

    def update(self, entity: FakeEntity) -> None:
        self.calls.append(("update", entity))
        if entity.id not in self.store:
            raise KeyError(entity.id)
        self.store[entity.id] = entity

    def remove(self, entity: FakeEntity) -> None:
        self.calls.append(("remove", entity))
        del self.store[entity.id]

    def remove_by_id(self, id: int) -> None:
        self.calls.append(("remove_by_id", id))
        del self.store[id]

    def try_add(self, entity: FakeEntity) -> bool:
        self.calls.append(("try_add", entity))
        if entity.id in self.store:
            return False
        self.store[entity.id] = entity
        return True

    def try_update(self, entity: FakeEntity) -> bool:
        self.calls.append(("try_update", entity))
        if entity.id not in self.store:
            return False
        self.store[entity.id] = entity
        return True

    def try_remove(self, entity: FakeEntity) -> bool:
        self.calls.append(("try_remove", entity))
        return self.store.pop(entity.id, None) is not None

    def try_remove_by_id(self, id: int) -> bool:
        self.calls.append(("try_remove_by_id", id))
        return self.store.pop(id, None) is not None


class InMemoryAsyncRepository:
    """Async counterpart of InMemoryRepository; yields to the loop on every call."""

    def __init__(self, *entities: FakeEntity) -> None:
        self._sync = InMemoryRepository(*entities)

    @property
    def store(self) -> dict[int, FakeEntity]:
        return self._sync.store

    @property
    def calls(self) -> list[tuple[str, object]]:
        return self._sync.calls

    async def get_count(self) -> int:
        await asyncio.sleep(0)
        return self._sync.get_count()

    async def get_all(self) -> list[FakeEntity]:
        await asyncio.sleep(0)
        return self._sync.get_all()

    async def get_by_id(self, id: int) -> FakeEntity:
        await asyncio.sleep(0)
        return self._sync.get_by_id(id)

    async def try_get_by_id(self, id: int) -> FakeEntity | None:
        await asyncio.sleep(0)
        return self._sync.try_get_by_id(id)

    async def add(self, entity: FakeEntity) -> None:
        await asyncio.sleep(0)
        self._sync.add(entity)

    async def add_or_update(self, entity: FakeEntity) -> None:
        await asyncio.sleep(0)
        self._sync.add_or_update(entity)

    async def update(self, entity: FakeEntity) -> None:
        await asyncio.sleep(0)
        self._sync.update(entity)

    async def remove(self, entity: FakeEntity) -> None:
        await asyncio.sleep(0)
        self._sync.remove(entity)

    async def remove_by_id(self, id: int) -> None:
        await asyncio.sleep(0)
        self._sync.remove_by_id(id)

    async def try_add(self, entity: FakeEntity) -> bool:
        await asyncio.sleep(0)
        return self._sync.try_add(entity)

    async def try_update(self, entity: FakeEntity) -> bool:
        await asyncio.sleep(0)
        return self._sync.try_update(entity)

    async def try_remove(self, entity: FakeEntity) -> bool:
        await asyncio.sleep(0)
        return self._sync.try_remove(entity)

    async def try_remove_by_id(self, id: int) -> bool:
        await asyncio.sleep(0)
        return self._sync.try_remove_by_id(id)


class FakeUnitOfWork:
    def __init__(self) -> None:
        self.commits = 0

    def commit(self) -> None:
        self.commits += 1


class FakeAsyncUnitOfWork:
    def __init__(self) -> None:
        self.commits = 0

    async def commit(self) -> None:
        await asyncio.sleep(0)
        self.commits += 1


class FailingCommand:
    """Command service whose every write raises ``error``."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls: list[str] = []

    def _fail(self, name: str) -> None:
        self.calls.append(name)
        raise self.error

    def add(self, entity: FakeEntity) -> None:
        self._fail("add")

    def add_or_update(self, entity: FakeEntity) -> None:
        self._fail("add_or_update")

    def update(self, entity: FakeEntity) -> None:
        self._fail("update")

    def remove(self, entity: FakeEntity) -> None:
        self._fail("remove")

    def remove_by_id(self, id: int) -> None:
        self._fail("remove_by_id")

    def try_add(self, entity: FakeEntity) -> bool:
        self._fail("try_add")
        return False

    def try_update(self, entity: FakeEntity) -> bool:
        self._fail("try_update")
        return False

    def try_remove(self, entity: FakeEntity) -> bool:
        self._fail("try_remove")
        return False

    def try_remove_by_id(self, id: int) -> bool:
        self._fail("try_remove_by_id")
        return False


class FailingAsyncCommand:
    """Async command service whose every write raises ``error``."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls: list[str] = []

    async def _fail(self, name: str) -> None:
        await asyncio.sleep(0)
        self.calls.append(name)
        raise self.error

    async def add(self, entity: FakeEntity) -> None:
        await self._fail("add")

    async def add_or_update(self, entity: FakeEntity) -> None:
        await self._fail("add_or_update")

    async def update(self, entity: FakeEntity) -> None:
        await self._fail("update")

    async def remove(self, entity: FakeEntity) -> None:
        await self._fail("remove")

    async def remove_by_id(self, id: int) -> None:
        await self._fail("remove_by_id")

    async def try_add(self, entity: FakeEntity) -> bool:
        await self._fail("try_add")
        return False

    async def try_update(self, entity: FakeEntity) -> bool:
        await self._fail("try_update")
        return False

    async def try_remove(self, entity: FakeEntity) -> bool:
        await self._fail("try_remove")
        return False

    async def try_remove_by_id(self, id: int) -> bool:
        await self._fail("try_remove_by_id")
        return False


@pytest.fixture
def entity() -> FakeEntity:
    return FakeEntity(id=1, name="first")


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def tap_repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def async_repository() -> InMemoryAsyncRepository:
    return InMemoryAsyncRepository()


@pytest.fixture
def async_tap_repository() -> InMemoryAsyncRepository:
    return InMemoryAsyncRepository()


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    """Reload DataTapSettings for every test so env changes are picked up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session", autouse=True)
def worker_executor() -> Iterator[None]:
    """Shut the shared worker executor down once the session is over."""
    yield
    shutdown_executor()


@pytest.fixture
def limited_executor(monkeypatch) -> Iterator[Callable[[int], None]]:
    """Replace the shared worker executor with one of a given size."""

    def limit(max_workers: int) -> None:
        monkeypatch.setenv("DATATAP_EXECUTOR_MAX_WORKERS", str(max_workers))
        get_settings.cache_clear()
        monkeypatch.setattr(execution, "_executor", None)

    yield limit
    shutdown_executor()
