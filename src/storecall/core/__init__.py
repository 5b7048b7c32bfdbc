"""Core functionalities: pure descriptor, query and normalization logic.

Architecture Note:
    core/ contains pure, stateless functions and models with no I/O.
    Store access lives in storage/ and adapters/; the dispatch lifecycle
    lives in middleware/.
"""

from storecall.core.descriptor import (
    ActionDescriptor,
    Add,
    Get,
    Operation,
    PathSegment,
    QueryDescriptor,
    SchemaDescriptor,
    Set,
    Subscribe,
    Update,
    validate_config,
)
from storecall.core.errors import (
    ConfigValidationError,
    FilterSyntaxError,
    SchemaApplicationError,
)
from storecall.core.normalize import NormalizedResult, make_schema_applier, normalize
from storecall.core.query import (
    CompiledReference,
    FilterPredicate,
    ResultShape,
    compile_query,
    parse_filter,
    parse_filters,
)

__all__ = [
    # Errors
    "ConfigValidationError",
    "FilterSyntaxError",
    "SchemaApplicationError",
    # Descriptors
    "ActionDescriptor",
    "QueryDescriptor",
    "SchemaDescriptor",
    "PathSegment",
    "Operation",
    "Subscribe",
    "Get",
    "Set",
    "Add",
    "Update",
    "validate_config",
    # Query
    "CompiledReference",
    "FilterPredicate",
    "ResultShape",
    "compile_query",
    "parse_filter",
    "parse_filters",
    # Normalization
    "NormalizedResult",
    "normalize",
    "make_schema_applier",
]
