"""Response normalization: store documents to an entities-by-id map.

Usage:
    schema = SchemaDescriptor(name="users", key="_id")
    normalize(schema, {"_id": 1, "firstName": "tina"})
    # NormalizedResult(entities={"users": {1: {"_id": 1, "firstName": "tina"}}}, ids=[1])

    normalize(None, response)  # no schema: response returned unchanged
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from storecall.core.descriptor.models import SchemaDescriptor
from storecall.core.errors import SchemaApplicationError
from storecall.core.normalize.models import NormalizedResult


def document_to_entity(document: Any) -> dict[str, Any]:
    """Plain-dict form of a document.

    Mappings are copied as-is. Snapshot-like objects (``id`` plus
    ``to_dict()``) become ``{"id": snapshot.id, **snapshot.to_dict()}``;
    document fields win over the snapshot id.
    """
    if isinstance(document, Mapping):
        return dict(document)
    try:
        doc_id = document.id
        to_dict = document.to_dict
    except AttributeError as e:
        raise SchemaApplicationError(
            f"Cannot normalize {type(document).__name__}: expected a mapping or a "
            "document snapshot with 'id' and 'to_dict()'"
        ) from e
    return {"id": doc_id, **(to_dict() or {})}


def _entity_id(entity: Any, key: str) -> Any:
    if isinstance(entity, Mapping):
        return entity.get(key)
    return getattr(entity, key, None)


def _as_documents(response: Any) -> Sequence[Any]:
    if isinstance(response, Sequence) and not isinstance(response, str | bytes):
        return response
    return [response]


def normalize(schema: SchemaDescriptor | None, response: Any) -> NormalizedResult | Any:
    """Normalize a single document or a sequence of documents.

    Args:
        schema: Entity schema, or None to pass the response through.
        response: One document, or a sequence of documents in response order.

    Returns:
        NormalizedResult, or ``response`` unchanged when schema is None.

    Raises:
        SchemaApplicationError: If the transform raises or an entity has no id.
    """
    if schema is None:
        return response

    entities: dict[Any, Any] = {}
    ids: list[Any] = []

    for document in _as_documents(response):
        entity: Any = document_to_entity(document)
        if schema.transform is not None:
            try:
                entity = schema.transform(entity)
            except Exception as e:
                raise SchemaApplicationError(
                    f"Transform for schema {schema.name!r} failed: {e}"
                ) from e

        entity_id = _entity_id(entity, schema.key)
        if entity_id is None:
            raise SchemaApplicationError(
                f"Entity for schema {schema.name!r} has no {schema.key!r} value"
            )
        # Colliding ids overwrite; ids keeps every occurrence in response order.
        entities[entity_id] = entity
        ids.append(entity_id)

    return NormalizedResult(entities={schema.name: entities}, ids=ids)


def make_schema_applier(
    schema: SchemaDescriptor | None,
) -> Callable[[Any], NormalizedResult | Any]:
    """Bind a schema: returns ``apply(response)``."""

    def apply(response: Any) -> NormalizedResult | Any:
        return normalize(schema, response)

    return apply
