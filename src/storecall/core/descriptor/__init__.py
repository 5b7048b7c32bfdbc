"""Action and query descriptors: parsing and structural validation."""

from storecall.core.descriptor.models import (
    DEFAULT_ENTITY_KEY,
    METHODS,
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
    operation_from_method,
    operation_name,
)
from storecall.core.descriptor.validation import validate_config

__all__ = [
    # Models
    "ActionDescriptor",
    "QueryDescriptor",
    "SchemaDescriptor",
    "PathSegment",
    "DEFAULT_ENTITY_KEY",
    "METHODS",
    # Operations
    "Operation",
    "Subscribe",
    "Get",
    "Set",
    "Add",
    "Update",
    "operation_from_method",
    "operation_name",
    # Validation
    "validate_config",
]
