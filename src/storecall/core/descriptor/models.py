"""Descriptor models: the declarative, data-only wire contract.

An action carrying the middleware marker holds an action descriptor:

    {
        "types": ["USERS_REQUEST", "USERS_SUCCESS", "USERS_FAILURE"],
        "schema": {"name": "users", "key": "id"},
        "query": {
            "collection": "teams",
            "doc": "red",
            "subcollections": [{"collection": "members"}],
            "where": ["age >= 18", "status == active"],
            "method": "get",
        },
    }

Mappings are parsed into the frozen dataclasses below by
``validate_config``; the ``method`` string becomes an ``Operation`` variant
carrying exactly the payload its store call needs.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

DEFAULT_ENTITY_KEY = "id"


@dataclass(frozen=True, slots=True)
class Subscribe:
    """Long-lived push subscription (``onSnapshot``)."""


@dataclass(frozen=True, slots=True)
class Get:
    """One-shot read."""


@dataclass(frozen=True, slots=True)
class Set:
    """Create or overwrite a document. ``options`` are forwarded (e.g. merge)."""

    data: Any = None
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Add:
    """Create a document with a store-generated id inside a collection."""

    data: Any = None


@dataclass(frozen=True, slots=True)
class Update:
    """Partially update an existing document."""

    data: Any = None


Operation = Subscribe | Get | Set | Add | Update

METHODS: tuple[str, ...] = ("onSnapshot", "get", "set", "update", "add")
"""Method names accepted on the wire."""

_METHOD_ALIASES = {"on_snapshot": "onSnapshot"}


def canonical_method(method: str) -> str:
    """Map accepted spellings (``on_snapshot``) to the wire method name."""
    return _METHOD_ALIASES.get(method, method)


def operation_from_method(
    method: str, data: Any = None, options: Mapping[str, Any] | None = None
) -> Operation:
    """Build the operation variant for a wire method name.

    Raises:
        ValueError: If method is not one of ``METHODS``.
    """
    method = canonical_method(method)
    if method == "onSnapshot":
        return Subscribe()
    if method == "get":
        return Get()
    if method == "set":
        return Set(data=data, options=dict(options or {}))
    if method == "add":
        return Add(data=data)
    if method == "update":
        return Update(data=data)
    raise ValueError(f"Unknown method: {method!r}")


def operation_name(operation: Operation) -> str:
    """Wire method name of an operation variant."""
    if isinstance(operation, Subscribe):
        return "onSnapshot"
    return type(operation).__name__.lower()


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One ``collection[/doc]`` step of a reference path."""

    collection: str
    doc: str | None = None


@dataclass(frozen=True, slots=True)
class QueryDescriptor:
    """Where in the store to go and what to do there.

    Attributes:
        collection: Top-level collection name.
        operation: Store operation to run against the compiled reference.
        doc: Document inside ``collection``. Required when subcollections are used.
        subcollections: Further ``collection[/doc]`` steps below ``doc``.
        where: Raw filter expressions (``"field operator value"``), ANDed.
        options: Store options; forwarded with ``Set``.
    """

    collection: str
    operation: Operation = field(default_factory=Get)
    doc: str | None = None
    subcollections: tuple[PathSegment, ...] = ()
    where: tuple[str, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> tuple[PathSegment, ...]:
        """Full path from the root: the top-level segment, then subcollections."""
        return (PathSegment(self.collection, self.doc), *self.subcollections)

    @property
    def method(self) -> str:
        return operation_name(self.operation)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> QueryDescriptor:
        """Create from a wire mapping. Expects an already validated mapping."""
        where = data.get("where")
        if where is None:
            where_exprs: tuple[str, ...] = ()
        elif isinstance(where, str):
            where_exprs = (where,)
        else:
            where_exprs = tuple(where)

        options = dict(data.get("options") or {})
        return cls(
            collection=data["collection"],
            operation=operation_from_method(data["method"], data.get("data"), options),
            doc=data.get("doc"),
            subcollections=tuple(
                PathSegment(sub["collection"], sub.get("doc"))
                for sub in data.get("subcollections") or ()
            ),
            where=where_exprs,
            options=options,
        )


@dataclass(frozen=True, slots=True)
class SchemaDescriptor:
    """How to turn store documents into keyed entities.

    Attributes:
        name: Entity collection name under ``entities``.
        key: Entity field holding the id.
        transform: Optional callable applied to each entity before keying.
    """

    name: str
    key: str = DEFAULT_ENTITY_KEY
    transform: Callable[[dict[str, Any]], Any] | None = None

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], default_key: str = DEFAULT_ENTITY_KEY
    ) -> SchemaDescriptor:
        return cls(
            name=data["name"],
            key=data.get("key") or default_key,
            transform=data.get("transform"),
        )


@dataclass(frozen=True, slots=True)
class ActionDescriptor:
    """Declarative payload describing a store call and its three action types."""

    types: tuple[str, str, str]
    query: QueryDescriptor
    schema: SchemaDescriptor | None = None
    payload: Any = None
    meta: Any = None
    bailout: Callable[[Any], bool] | None = None

    @property
    def request_type(self) -> str:
        return self.types[0]

    @property
    def success_type(self) -> str:
        return self.types[1]

    @property
    def failure_type(self) -> str:
        return self.types[2]

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], default_key: str = DEFAULT_ENTITY_KEY
    ) -> ActionDescriptor:
        """Create from a wire mapping. Expects an already validated mapping."""
        schema = data.get("schema")
        request, success, failure = data["types"]
        return cls(
            types=(request, success, failure),
            query=QueryDescriptor.from_mapping(data["query"]),
            schema=SchemaDescriptor.from_mapping(schema, default_key) if schema else None,
            payload=data.get("payload"),
            meta=data.get("meta"),
            bailout=data.get("bailout"),
        )
