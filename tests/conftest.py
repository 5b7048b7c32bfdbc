"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from typing import Any

from storecall.storage import MemoryStore


class FakeRef:
    """Reference double that records its chain as text.

    ``FakeRef().collection("test").doc("hi").chain`` is
    ``"db.collection('test').doc('hi')"``. One-shot operations return the
    configured ``response`` (or raise ``error``) and log into ``calls``.
    """

    def __init__(
        self,
        chain: str = "db",
        calls: list[tuple[Any, ...]] | None = None,
        response: Any = None,
        error: BaseException | None = None,
    ) -> None:
        self.chain = chain
        self.calls = calls if calls is not None else []
        self.response = response
        self.error = error
        self.listeners: list[tuple[Any, Any]] = []

    def _child(self, chain: str) -> "FakeRef":
        child = FakeRef(chain, self.calls, self.response, self.error)
        child.listeners = self.listeners
        return child

    def collection(self, name: str) -> "FakeRef":
        return self._child(f"{self.chain}.collection({name!r})")

    def doc(self, name: str) -> "FakeRef":
        return self._child(f"{self.chain}.doc({name!r})")

    def where(self, field: str, operator: str, value: Any) -> "FakeRef":
        return self._child(f"{self.chain}.where({field!r}, {operator!r}, {value!r})")

    async def _call(self, *call: Any) -> Any:
        self.calls.append((self.chain, *call))
        if self.error is not None:
            raise self.error
        return self.response

    async def get(self) -> Any:
        return await self._call("get")

    async def set(self, data: Any, **options: Any) -> Any:
        return await self._call("set", data, options)

    async def add(self, data: Any) -> Any:
        return await self._call("add", data)

    async def update(self, data: Any) -> Any:
        return await self._call("update", data)

    def on_snapshot(self, on_next: Any, on_error: Any) -> str:
        self.calls.append((self.chain, "on_snapshot"))
        self.listeners.append((on_next, on_error))
        return "subscription"


class FakeSnapshot:
    """Document snapshot double."""

    def __init__(self, id: str, data: dict[str, Any] | None) -> None:
        self.id = id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> dict[str, Any] | None:
        return None if self._data is None else dict(self._data)


class FakeQuerySnapshot:
    def __init__(self, docs: list[FakeSnapshot]) -> None:
        self.docs = docs


class Pipeline:
    """Host pipeline double: holds state and records every forwarded action."""

    def __init__(self, state: Any = None) -> None:
        self.state = state if state is not None else {}
        self.actions: list[dict[str, Any]] = []

    def get_state(self) -> Any:
        return self.state

    def next_(self, action: dict[str, Any]) -> dict[str, Any]:
        self.actions.append(action)
        return action

    @property
    def types(self) -> list[str]:
        return [action.get("type") for action in self.actions]


@pytest.fixture
def root() -> FakeRef:
    """Recording root handle."""
    return FakeRef()


@pytest.fixture
def pipeline() -> Pipeline:
    return Pipeline()


@pytest.fixture
def memory_store() -> MemoryStore:
    """MemoryStore with deterministic ids for add()."""
    counter = iter(range(1, 1_000_000))
    return MemoryStore(id_factory=lambda: f"gen{next(counter):04d}")


@pytest.fixture
def ref_cls() -> type[FakeRef]:
    return FakeRef


@pytest.fixture
def snapshot_cls() -> type[FakeSnapshot]:
    return FakeSnapshot


@pytest.fixture
def query_snapshot_cls() -> type[FakeQuerySnapshot]:
    return FakeQuerySnapshot
