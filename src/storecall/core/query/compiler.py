"""Query compiler: descriptor in, compiled reference out.

Pure structural assembly over the store's reference objects. No I/O happens
here; the returned CompiledReference is executed separately.

Usage:
    ref = compile_query(store, QueryDescriptor.from_mapping({
        "collection": "teams",
        "doc": "red",
        "subcollections": [{"collection": "members"}],
        "where": "age >= 18",
        "method": "get",
    }))
    # store.collection('teams').doc('red').collection('members').where('age', '>=', 18)
"""

from __future__ import annotations

from collections.abc import Callable
from functools import reduce
from typing import Any

from storecall.core.descriptor.models import Add, PathSegment, QueryDescriptor
from storecall.core.query.filters import parse_filters
from storecall.core.query.models import CompiledReference, ResultShape


def _step(ref: Any, segment: PathSegment) -> Any:
    """Narrow to the segment's collection, then to its document if named."""
    ref = ref.collection(segment.collection)
    if segment.doc:
        ref = ref.doc(segment.doc)
    return ref


def resolve_shape(query: QueryDescriptor, filtered: bool) -> ResultShape:
    """Decide the result shape from the descriptor alone.

    A path ending on a document with no filters resolves to that document.
    An add always resolves to the single document it created.
    """
    if isinstance(query.operation, Add):
        return ResultShape.DOCUMENT
    if query.path[-1].doc and not filtered:
        return ResultShape.DOCUMENT
    return ResultShape.COLLECTION


def compile_query(root: Any, query: QueryDescriptor) -> CompiledReference:
    """Fold the descriptor's path over ``root`` and apply its filters.

    Args:
        root: Store root handle supporting ``collection(name)``.
        query: Parsed query descriptor.

    Returns:
        CompiledReference tagged with its compile-time ResultShape.

    Raises:
        FilterSyntaxError: If a where expression is malformed.
    """
    path = query.path
    ref = reduce(_step, path, root)

    filters = parse_filters(query.where)
    for predicate in filters:
        ref = ref.where(predicate.field, predicate.operator, predicate.value)

    return CompiledReference(
        handle=ref,
        shape=resolve_shape(query, filtered=bool(filters)),
        path=path,
        filters=filters,
    )


def make_query_builder(root: Any) -> Callable[[QueryDescriptor], CompiledReference]:
    """Bind a root handle: returns ``build(query) -> CompiledReference``."""

    def build(query: QueryDescriptor) -> CompiledReference:
        return compile_query(root, query)

    return build
