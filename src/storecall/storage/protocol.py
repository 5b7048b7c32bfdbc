"""Store protocols for swappable document-store backends.

The middleware only ever talks to these interfaces, enabling:
- In-memory store (tests, local development)
- Google Cloud Firestore (storecall.adapters.firestore)
- Any other document store with the same reference shape

Usage:
    store = MemoryStore()
    middleware = create_middleware(store)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

SnapshotCallback = Callable[[Any], Any]
ErrorCallback = Callable[[BaseException], Any]


class StoreOperationError(RuntimeError):
    """A store call failed (network, permissions, missing document, ...).

    Store implementations raise this, chaining the underlying error.
    """


@runtime_checkable
class DocumentSnapshot(Protocol):
    """Point-in-time read of one document."""

    @property
    def id(self) -> str:
        """Document id (last path segment)."""
        ...

    @property
    def exists(self) -> bool:
        """False when the document has no data."""
        ...

    def to_dict(self) -> dict[str, Any] | None:
        """Document fields, or None if the document does not exist."""
        ...


@runtime_checkable
class QuerySnapshot(Protocol):
    """Point-in-time read of a collection or query."""

    @property
    def docs(self) -> Sequence[DocumentSnapshot]:
        """Matching documents in store order."""
        ...


@runtime_checkable
class Subscription(Protocol):
    """Handle returned by ``on_snapshot``. Lives until unsubscribed."""

    def unsubscribe(self) -> None:
        """Stop delivering snapshots."""
        ...


@runtime_checkable
class QueryReference(Protocol):
    """Filtered view over a collection."""

    def where(self, field: str, operator: str, value: Any) -> QueryReference:
        """Narrow by ``field operator value``. Multiple calls are ANDed."""
        ...

    async def get(self) -> QuerySnapshot:
        """Read all matching documents."""
        ...

    def on_snapshot(
        self, on_next: SnapshotCallback, on_error: ErrorCallback
    ) -> Subscription:
        """Deliver a QuerySnapshot now and after every relevant change."""
        ...


@runtime_checkable
class CollectionReference(QueryReference, Protocol):
    """Named collection of documents."""

    def doc(self, name: str) -> DocumentReference:
        """Reference to a document in this collection (it need not exist)."""
        ...

    async def add(self, data: Mapping[str, Any]) -> DocumentSnapshot:
        """Create a document with a store-generated id."""
        ...


@runtime_checkable
class DocumentReference(Protocol):
    """Reference to a single document."""

    def collection(self, name: str) -> CollectionReference:
        """Subcollection below this document."""
        ...

    async def get(self) -> DocumentSnapshot:
        """Read the document."""
        ...

    async def set(self, data: Mapping[str, Any], **options: Any) -> DocumentSnapshot:
        """Create or overwrite the document. ``merge=True`` merges fields."""
        ...

    async def update(self, data: Mapping[str, Any]) -> DocumentSnapshot:
        """Update fields of an existing document.

        Raises:
            StoreOperationError: If the document does not exist.
        """
        ...

    def on_snapshot(
        self, on_next: SnapshotCallback, on_error: ErrorCallback
    ) -> Subscription:
        """Deliver a DocumentSnapshot now and after every change."""
        ...


@runtime_checkable
class DocumentStore(Protocol):
    """Root handle of a document store."""

    def collection(self, name: str) -> CollectionReference:
        """Top-level collection."""
        ...
