"""Query compilation: filter parsing and reference building."""

from storecall.core.query.compiler import compile_query, make_query_builder, resolve_shape
from storecall.core.query.filters import coerce_value, parse_filter, parse_filters
from storecall.core.query.models import (
    CompiledReference,
    FilterPredicate,
    FilterValue,
    ResultShape,
)

__all__ = [
    # Models
    "CompiledReference",
    "FilterPredicate",
    "FilterValue",
    "ResultShape",
    # Filters
    "parse_filter",
    "parse_filters",
    "coerce_value",
    # Compiler
    "compile_query",
    "make_query_builder",
    "resolve_shape",
]
