"""In-memory document store.

Dict-backed store implementing the storage protocols. Suitable for tests
and single-process use; nothing is persisted.

Structure:
    _documents[("teams", "red", "members", "ann")] = {"age": 31}

Usage:
    store = MemoryStore()
    store.put("teams/red/members/ann", {"age": 31})

    snapshot = await store.collection("teams").doc("red").collection("members").get()
    [doc.id for doc in snapshot.docs]  # ["ann"]
"""

from __future__ import annotations

import copy
import operator as op
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from storecall.storage.protocol import ErrorCallback, SnapshotCallback, StoreOperationError

Path = tuple[str, ...]

_MISSING = object()


def _contains(container: Any, value: Any) -> bool:
    return isinstance(container, list | tuple) and value in container


def _contains_any(container: Any, values: Any) -> bool:
    return isinstance(container, list | tuple) and any(v in container for v in values)


_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": op.eq,
    "!=": op.ne,
    "<": op.lt,
    "<=": op.le,
    ">": op.gt,
    ">=": op.ge,
    "in": lambda field_value, values: field_value in values,
    "not-in": lambda field_value, values: field_value not in values,
    "array-contains": _contains,
    "array-contains-any": _contains_any,
}
# Python client spellings
_OPERATORS["not_in"] = _OPERATORS["not-in"]
_OPERATORS["array_contains"] = _OPERATORS["array-contains"]
_OPERATORS["array_contains_any"] = _OPERATORS["array-contains-any"]

# Operators whose value must be a list of candidates
_LIST_OPERATORS = frozenset(
    {"in", "not-in", "not_in", "array-contains-any", "array_contains_any"}
)


def _lookup(data: Mapping[str, Any], field_path: str) -> Any:
    """Resolve a dotted field path (``address.city``)."""
    value: Any = data
    for part in field_path.split("."):
        if not isinstance(value, Mapping) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _split_path(path: str) -> Path:
    return tuple(part for part in path.split("/") if part)


@dataclass(frozen=True, slots=True)
class MemoryDocumentSnapshot:
    """Snapshot of one document. ``to_dict`` returns a fresh copy."""

    id: str
    path: Path
    _data: dict[str, Any] | None = None

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._data)


@dataclass(frozen=True, slots=True)
class MemoryQuerySnapshot:
    """Snapshot of a collection or query."""

    docs: list[MemoryDocumentSnapshot] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.docs)

    @property
    def empty(self) -> bool:
        return not self.docs


@dataclass(eq=False, slots=True)
class _Listener:
    target: Path
    read: Callable[[], Any]
    on_next: SnapshotCallback
    on_error: ErrorCallback

    def deliver(self) -> None:
        try:
            snapshot = self.read()
        except StoreOperationError as e:
            self.on_error(e)
            return
        try:
            self.on_next(snapshot)
        except Exception as e:
            # The write already happened; the failure belongs to this listener.
            self.on_error(e)


class MemorySubscription:
    """Handle for a registered snapshot listener."""

    def __init__(self, store: MemoryStore, listener: _Listener) -> None:
        self._store = store
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._store._listeners.remove(self._listener)
            self.active = False


class MemoryQuery:
    """Collection view narrowed by zero or more filters."""

    def __init__(
        self,
        store: MemoryStore,
        path: Path,
        filters: tuple[tuple[str, str, Any], ...] = (),
    ) -> None:
        self._store = store
        self._path = path
        self._filters = filters

    @property
    def path(self) -> str:
        return "/".join(self._path)

    def where(self, field: str, operator: str, value: Any) -> MemoryQuery:
        return MemoryQuery(self._store, self._path, (*self._filters, (field, operator, value)))

    def _matches(self, data: Mapping[str, Any]) -> bool:
        for field_path, operator, value in self._filters:
            compare = _OPERATORS[operator]
            field_value = _lookup(data, field_path)
            if field_value is _MISSING:
                return False
            try:
                if not compare(field_value, value):
                    return False
            except TypeError:
                return False
        return True

    def _read(self) -> MemoryQuerySnapshot:
        for field_path, operator, value in self._filters:
            if operator not in _OPERATORS:
                raise StoreOperationError(f"Unsupported filter operator: {operator!r}")
            if operator in _LIST_OPERATORS and not isinstance(value, list | tuple):
                raise StoreOperationError(
                    f"Filter {field_path!r} {operator!r} needs a list value, "
                    f"got {type(value).__name__}"
                )
        docs = [
            snapshot
            for snapshot in self._store._children(self._path)
            if self._matches(snapshot._data or {})
        ]
        return MemoryQuerySnapshot(docs=docs)

    async def get(self) -> MemoryQuerySnapshot:
        return self._read()

    def on_snapshot(
        self, on_next: SnapshotCallback, on_error: ErrorCallback
    ) -> MemorySubscription:
        return self._store._subscribe(self._path, self._read, on_next, on_error)


class MemoryCollection(MemoryQuery):
    """Named collection. Filters narrow it into a MemoryQuery."""

    @property
    def id(self) -> str:
        return self._path[-1]

    def doc(self, name: str) -> MemoryDocument:
        return MemoryDocument(self._store, (*self._path, name))

    async def add(self, data: Mapping[str, Any]) -> MemoryDocumentSnapshot:
        document = self.doc(self._store._new_id())
        return await document.set(data)


class MemoryDocument:
    """Reference to one document, existing or not."""

    def __init__(self, store: MemoryStore, path: Path) -> None:
        self._store = store
        self._path = path

    @property
    def id(self) -> str:
        return self._path[-1]

    @property
    def path(self) -> str:
        return "/".join(self._path)

    def collection(self, name: str) -> MemoryCollection:
        return MemoryCollection(self._store, (*self._path, name))

    def _read(self) -> MemoryDocumentSnapshot:
        return self._store._snapshot(self._path)

    async def get(self) -> MemoryDocumentSnapshot:
        return self._read()

    async def set(self, data: Mapping[str, Any], merge: bool = False) -> MemoryDocumentSnapshot:
        current = self._store._documents.get(self._path)
        if merge and current is not None:
            self._store._write(self._path, {**current, **_checked(data)})
        else:
            self._store._write(self._path, _checked(data))
        return self._read()

    async def update(self, data: Mapping[str, Any]) -> MemoryDocumentSnapshot:
        current = self._store._documents.get(self._path)
        if current is None:
            raise StoreOperationError(f"No document to update: {self.path}")
        self._store._write(self._path, {**current, **_checked(data)})
        return self._read()

    def on_snapshot(
        self, on_next: SnapshotCallback, on_error: ErrorCallback
    ) -> MemorySubscription:
        return self._store._subscribe(self._path, self._read, on_next, on_error)


def _checked(data: Any) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise StoreOperationError(
            f"Document data must be a mapping, got {type(data).__name__}"
        )
    return copy.deepcopy(dict(data))


class MemoryStore:
    """Root handle of the in-memory store.

    Args:
        id_factory: Generates ids for ``add``. Defaults to uuid4 hex strings.
    """

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._documents: dict[Path, dict[str, Any]] = {}
        self._listeners: list[_Listener] = []
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)

    def collection(self, name: str) -> MemoryCollection:
        return MemoryCollection(self, (name,))

    def put(self, path: str, data: Mapping[str, Any]) -> None:
        """Write a document synchronously, e.g. ``put("users/ann", {...})``.

        Raises:
            ValueError: If path does not name a document (even segment count).
        """
        parts = _split_path(path)
        if not parts or len(parts) % 2:
            raise ValueError(f"Not a document path: {path!r}")
        self._write(parts, _checked(data))

    def _new_id(self) -> str:
        return self._id_factory()

    def _snapshot(self, path: Path) -> MemoryDocumentSnapshot:
        data = self._documents.get(path)
        return MemoryDocumentSnapshot(id=path[-1], path=path, _data=copy.deepcopy(data))

    def _children(self, collection_path: Path) -> list[MemoryDocumentSnapshot]:
        """Documents directly inside a collection, ordered by id."""
        depth = len(collection_path) + 1
        paths = sorted(
            path
            for path in self._documents
            if len(path) == depth and path[:-1] == collection_path
        )
        return [self._snapshot(path) for path in paths]

    def _write(self, path: Path, data: dict[str, Any]) -> None:
        self._documents[path] = data
        for listener in list(self._listeners):
            if listener.target in (path, path[:-1]):
                listener.deliver()

    def _subscribe(
        self,
        target: Path,
        read: Callable[[], Any],
        on_next: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> MemorySubscription:
        listener = _Listener(target=target, read=read, on_next=on_next, on_error=on_error)
        self._listeners.append(listener)
        listener.deliver()
        return MemorySubscription(self, listener)
