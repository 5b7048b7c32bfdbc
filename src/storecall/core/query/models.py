"""Query models: filter predicates and compiled references.

Usage:
    ref = compile_query(store, QueryDescriptor(collection="users", where=("age >= 18",)))
    ref.shape            # ResultShape.COLLECTION
    ref.describe()       # "store.collection('users').where('age', '>=', 18)"
    snapshot = await ref.get()
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from storecall.core.descriptor.models import (
    Add,
    Get,
    Operation,
    PathSegment,
    Set,
    Subscribe,
    Update,
)

FilterValue = str | int | float


@dataclass(frozen=True, slots=True)
class FilterPredicate:
    """Structured form of one ``"field operator value"`` filter expression."""

    field: str
    operator: str
    value: FilterValue

    def __str__(self) -> str:
        return f"{self.field} {self.operator} {self.value}"


class ResultShape(Enum):
    """What a compiled reference resolves to, decided at compile time."""

    DOCUMENT = "document"
    """Path ends on a document and no filters were applied (or an add)."""

    COLLECTION = "collection"
    """Path ends on a collection or a filtered query; results carry ``docs``."""


@dataclass(frozen=True, slots=True)
class CompiledReference:
    """Executable handle over a store path/filter chain.

    Created per invocation by ``compile_query``; never cached. Store calls
    delegate to ``handle``, which is whatever the store's reference
    objects are.
    """

    handle: Any
    shape: ResultShape
    path: tuple[PathSegment, ...]
    filters: tuple[FilterPredicate, ...] = ()

    @property
    def is_document(self) -> bool:
        return self.shape is ResultShape.DOCUMENT

    async def get(self) -> Any:
        return await self.handle.get()

    async def set(self, data: Any, options: Mapping[str, Any] | None = None) -> Any:
        return await self.handle.set(data, **dict(options or {}))

    async def add(self, data: Any) -> Any:
        return await self.handle.add(data)

    async def update(self, data: Any) -> Any:
        return await self.handle.update(data)

    def on_snapshot(
        self,
        on_next: Callable[[Any], Any],
        on_error: Callable[[BaseException], Any],
    ) -> Any:
        """Register a push subscription. Returns the store's subscription handle."""
        return self.handle.on_snapshot(on_next, on_error)

    async def execute(self, operation: Operation) -> Any:
        """Run a one-shot operation against this reference.

        Raises:
            TypeError: For ``Subscribe``, which is not one-shot; use ``on_snapshot``.
        """
        if isinstance(operation, Get):
            return await self.get()
        if isinstance(operation, Set):
            return await self.set(operation.data, operation.options)
        if isinstance(operation, Add):
            return await self.add(operation.data)
        if isinstance(operation, Update):
            return await self.update(operation.data)
        if isinstance(operation, Subscribe):
            raise TypeError("Subscribe is not a one-shot operation; use on_snapshot()")
        raise TypeError(f"Unknown operation: {operation!r}")

    def extract(self, response: Any) -> Any:
        """Select what gets normalized: the response itself, or its ``docs``."""
        if self.is_document:
            return response
        return response.docs

    def describe(self, root_name: str = "store") -> str:
        """Render the reference chain, e.g. ``store.collection('a').doc('b')``."""
        parts = [root_name]
        for segment in self.path:
            parts.append(f"collection({segment.collection!r})")
            if segment.doc:
                parts.append(f"doc({segment.doc!r})")
        for predicate in self.filters:
            parts.append(f"where({predicate.field!r}, {predicate.operator!r}, {predicate.value!r})")
        return ".".join(parts)
