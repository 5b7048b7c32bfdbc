"""Structural validation of action descriptors.

Runs before any side effect. Every failure raises ConfigValidationError.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from storecall.core.descriptor.models import (
    DEFAULT_ENTITY_KEY,
    METHODS,
    ActionDescriptor,
    canonical_method,
)
from storecall.core.errors import ConfigValidationError
from storecall.core.query.filters import parse_filters

QUERY_HELP = """\
query* {mapping} - describes the store query to build
    collection* {str} - name of collection to access
    doc {str} - name of doc to access inside collection
    subcollections {list} - [{collection, doc}] path of nested records below doc
    where {str | list[str]} - filter expression(s), e.g. 'status == completed'
    method* {str} - store operation (onSnapshot, get, set, update, add)
    data {any} - data to write (set, update, add)
    options {mapping} - options forwarded to the store (set), e.g. {'merge': True}"""


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


def _validate_types(types: Any) -> None:
    if not _is_sequence(types) or len(types) != 3:
        raise ConfigValidationError("Expected a sequence of three action types.")
    if not all(isinstance(action_type, str) for action_type in types):
        raise ConfigValidationError("Expected action types to be strings.")


def _validate_schema(schema: Any) -> None:
    if not isinstance(schema, Mapping):
        raise ConfigValidationError(
            f"Expected 'schema' to be a mapping, got {type(schema).__name__}"
        )
    if not isinstance(schema.get("name"), str) or not schema["name"]:
        raise ConfigValidationError("Expected 'schema.name' to be a non-empty string.")
    key = schema.get("key")
    if key is not None and not isinstance(key, str):
        raise ConfigValidationError("Expected 'schema.key' to be a string.")
    transform = schema.get("transform")
    if transform is not None and not callable(transform):
        raise ConfigValidationError("Expected 'schema.transform' to be callable.")


def _validate_query(query: Any, request_type: str) -> None:
    if not query:
        raise ConfigValidationError(
            f"No 'query' value provided in middleware config. 'query' required.\n{QUERY_HELP}"
        )
    if not isinstance(query, Mapping):
        raise ConfigValidationError(
            f"Expected 'query' to be a mapping, got {type(query).__name__}"
        )

    method = query.get("method")
    if not method:
        raise ConfigValidationError(
            "No 'method' value provided on 'query'. 'method' required. "
            f"Available methods: {', '.join(METHODS)}"
        )
    if not isinstance(method, str) or canonical_method(method) not in METHODS:
        raise ConfigValidationError(
            f"Unknown method {method!r}. Available methods: {', '.join(METHODS)}"
        )

    if not query.get("collection"):
        raise ConfigValidationError("No 'collection' value provided on 'query'.")

    subcollections = query.get("subcollections")
    if subcollections is not None:
        if not _is_sequence(subcollections):
            raise ConfigValidationError(
                "Unexpected type: 'subcollections' should be a sequence. "
                f"From {request_type} call."
            )
        if subcollections and not query.get("doc"):
            raise ConfigValidationError(
                "No 'doc' value provided on 'query'. Required in order to access subcollections."
            )
        for sub in subcollections:
            if not isinstance(sub, Mapping) or not sub.get("collection"):
                raise ConfigValidationError(
                    f"Each subcollection needs a 'collection' value, got {sub!r}"
                )

    where = query.get("where")
    if where is not None:
        if not isinstance(where, str) and not (
            _is_sequence(where) and all(isinstance(expr, str) for expr in where)
        ):
            raise ConfigValidationError(
                "Expected 'where' to be a filter string or a sequence of filter strings."
            )
        parse_filters(where)


def validate_config(
    config: Mapping[str, Any], default_key: str = DEFAULT_ENTITY_KEY
) -> ActionDescriptor:
    """Check an action descriptor and parse it.

    Args:
        config: Descriptor mapping found under the middleware marker.
        default_key: Entity key used when the schema does not name one.

    Returns:
        The parsed ActionDescriptor.

    Raises:
        ConfigValidationError: On any structural problem (FilterSyntaxError
            for malformed where expressions).
    """
    if not isinstance(config, Mapping):
        raise ConfigValidationError(
            f"Expected middleware config to be a mapping, got {type(config).__name__}"
        )

    types = config.get("types")
    _validate_types(types)

    bailout = config.get("bailout")
    if bailout is not None and not callable(bailout):
        raise ConfigValidationError("Expected bailout to either be None or a callable.")

    schema = config.get("schema")
    if schema is not None:
        _validate_schema(schema)

    _validate_query(config.get("query"), request_type=types[0])

    return ActionDescriptor.from_mapping(config, default_key=default_key)
