"""Store protocols and the in-memory backend."""

from storecall.storage.memory import (
    MemoryCollection,
    MemoryDocument,
    MemoryDocumentSnapshot,
    MemoryQuery,
    MemoryQuerySnapshot,
    MemoryStore,
    MemorySubscription,
)
from storecall.storage.protocol import (
    CollectionReference,
    DocumentReference,
    DocumentSnapshot,
    DocumentStore,
    QueryReference,
    QuerySnapshot,
    StoreOperationError,
    Subscription,
)

__all__ = [
    # Protocols
    "DocumentStore",
    "CollectionReference",
    "QueryReference",
    "DocumentReference",
    "DocumentSnapshot",
    "QuerySnapshot",
    "Subscription",
    "StoreOperationError",
    # In-memory backend
    "MemoryStore",
    "MemoryCollection",
    "MemoryQuery",
    "MemoryDocument",
    "MemoryDocumentSnapshot",
    "MemoryQuerySnapshot",
    "MemorySubscription",
]
