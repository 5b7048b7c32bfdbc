"""Google Cloud Firestore adapter implementing the storage protocols.

Wraps the synchronous ``google.cloud.firestore.Client``: blocking calls run
in a worker thread via ``asyncio.to_thread`` and snapshot callbacks, which
Firestore delivers on its own watch thread, are handed back to the event
loop that registered them.

Usage:
    from storecall.adapters.firestore import FirestoreStore

    store = FirestoreStore.from_project("my-project")
    middleware = create_middleware(store)

    # Or wrap an existing client
    store = FirestoreStore.from_client(firestore.Client())

Writes (set, update, add) resolve to a fresh snapshot of the written
document, read back after the write.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from storecall.storage.protocol import ErrorCallback, SnapshotCallback, StoreOperationError

if TYPE_CHECKING:
    from google.cloud import firestore

T = TypeVar("T")

# JS SDK spellings accepted in where expressions, mapped to the Python client's
_OPERATOR_ALIASES = {
    "array-contains": "array_contains",
    "array-contains-any": "array_contains_any",
    "not_in": "not-in",
}


def _translate_operator(operator: str) -> str:
    """Map a filter operator to the spelling the Python client expects."""
    return _OPERATOR_ALIASES.get(operator, operator)


def _google_api_error() -> type[BaseException]:
    try:
        from google.api_core.exceptions import GoogleAPIError
    except ImportError as e:
        raise ImportError(
            "google-cloud-firestore is required for FirestoreStore. "
            "Install with: pip install storecall[firestore]"
        ) from e
    return GoogleAPIError


async def _run(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking client call in a thread, wrapping API errors."""
    api_error = _google_api_error()
    try:
        return await asyncio.to_thread(fn, *args, **kwargs)
    except api_error as e:
        raise StoreOperationError(str(e)) from e


def _snapshot_callback(
    select: Callable[[Sequence[Any]], Any],
    on_next: SnapshotCallback,
    on_error: ErrorCallback,
) -> Callable[[Sequence[Any], Any, Any], None]:
    """Adapt Firestore's ``(docs, changes, read_time)`` callback.

    When registered from inside a running event loop, deliveries are
    scheduled onto that loop; otherwise they run on the watch thread.
    """
    try:
        loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    def deliver(docs: Sequence[Any]) -> None:
        try:
            on_next(select(docs))
        except Exception as e:
            on_error(e)

    def callback(docs: Sequence[Any], changes: Any, read_time: Any) -> None:
        if loop is None:
            deliver(docs)
        else:
            loop.call_soon_threadsafe(deliver, list(docs))

    return callback


def _first(docs: Sequence[Any]) -> Any:
    return docs[0]


@dataclass(frozen=True, slots=True)
class FirestoreQuerySnapshot:
    """Query result: Firestore returns a list, the protocol wants ``docs``."""

    docs: list[Any] = field(default_factory=list)


def _as_query_snapshot(docs: Sequence[Any]) -> FirestoreQuerySnapshot:
    return FirestoreQuerySnapshot(docs=list(docs))


class FirestoreQuery:
    """Wraps a Firestore Query (or CollectionReference used as one)."""

    def __init__(self, ref: Any) -> None:
        self._ref = ref

    def where(self, field: str, operator: str, value: Any) -> FirestoreQuery:
        from google.cloud.firestore_v1.base_query import FieldFilter

        return FirestoreQuery(
            self._ref.where(filter=FieldFilter(field, _translate_operator(operator), value))
        )

    async def get(self) -> FirestoreQuerySnapshot:
        docs = await _run(self._ref.get)
        return _as_query_snapshot(docs)

    def on_snapshot(self, on_next: SnapshotCallback, on_error: ErrorCallback) -> Any:
        return self._ref.on_snapshot(_snapshot_callback(_as_query_snapshot, on_next, on_error))


class FirestoreCollection(FirestoreQuery):
    """Wraps a Firestore CollectionReference."""

    def doc(self, name: str) -> FirestoreDocument:
        return FirestoreDocument(self._ref.document(name))

    async def add(self, data: Mapping[str, Any]) -> Any:
        def write() -> Any:
            _, ref = self._ref.add(dict(data))
            return ref.get()

        return await _run(write)


class FirestoreDocument:
    """Wraps a Firestore DocumentReference."""

    def __init__(self, ref: Any) -> None:
        self._ref = ref

    def collection(self, name: str) -> FirestoreCollection:
        return FirestoreCollection(self._ref.collection(name))

    async def get(self) -> Any:
        return await _run(self._ref.get)

    async def set(self, data: Mapping[str, Any], merge: bool = False) -> Any:
        def write() -> Any:
            self._ref.set(dict(data), merge=merge)
            return self._ref.get()

        return await _run(write)

    async def update(self, data: Mapping[str, Any]) -> Any:
        def write() -> Any:
            self._ref.update(dict(data))
            return self._ref.get()

        return await _run(write)

    def on_snapshot(self, on_next: SnapshotCallback, on_error: ErrorCallback) -> Any:
        return self._ref.on_snapshot(_snapshot_callback(_first, on_next, on_error))


class FirestoreStore:
    """Root handle over a ``google.cloud.firestore.Client``."""

    def __init__(self, client: firestore.Client) -> None:
        self._client = client

    @classmethod
    def from_client(cls, client: firestore.Client) -> FirestoreStore:
        """Wrap an existing client."""
        return cls(client)

    @classmethod
    def from_project(
        cls, project: str | None = None, database: str | None = None
    ) -> FirestoreStore:
        """Create a client from application default credentials.

        Args:
            project: Google Cloud project id (inferred from the environment if None).
            database: Firestore database id (the default database if None).
        """
        try:
            from google.cloud import firestore
        except ImportError as e:
            raise ImportError(
                "google-cloud-firestore is required for FirestoreStore. "
                "Install with: pip install storecall[firestore]"
            ) from e

        return cls(firestore.Client(project=project, database=database))

    def collection(self, name: str) -> FirestoreCollection:
        return FirestoreCollection(self._client.collection(name))
