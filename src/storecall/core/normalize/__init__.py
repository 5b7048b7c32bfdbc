"""Response normalization: documents to entities keyed by id."""

from storecall.core.normalize.models import NormalizedResult
from storecall.core.normalize.operations import (
    document_to_entity,
    make_schema_applier,
    normalize,
)

__all__ = [
    # Models
    "NormalizedResult",
    # Operations
    "normalize",
    "make_schema_applier",
    "document_to_entity",
]
