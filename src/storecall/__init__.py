"""storecall: document-store calls from a Redux-style dispatch pipeline.

Usage:
    from storecall import MemoryStore, create_middleware

    middleware = create_middleware(MemoryStore())
    dispatch = middleware(host)(next_)

    await dispatch({
        "CALL_STORE": {
            "types": ["USERS_REQUEST", "USERS_SUCCESS", "USERS_FAILURE"],
            "schema": {"name": "users"},
            "query": {"collection": "users", "where": "age >= 18", "method": "get"},
        }
    })
    # next_ receives USERS_REQUEST, then USERS_SUCCESS with
    # payload NormalizedResult(entities={"users": {...}}, ids=[...])
"""

__version__ = "0.1.0"

# Configuration
from storecall.config import MiddlewareSettings

# Core primitives
from storecall.core import (
    ActionDescriptor,
    CompiledReference,
    ConfigValidationError,
    FilterPredicate,
    FilterSyntaxError,
    NormalizedResult,
    QueryDescriptor,
    ResultShape,
    SchemaApplicationError,
    SchemaDescriptor,
    compile_query,
    normalize,
    parse_filter,
    validate_config,
)

# Middleware
from storecall.middleware import HostStore, StoreCallMiddleware, create_middleware

# Storage
from storecall.storage import (
    DocumentStore,
    MemoryStore,
    StoreOperationError,
)

# Failure reporting
from storecall.tracing import (
    ErrorContext,
    ErrorReporter,
    LoggingReporter,
    NullReporter,
    WarningReporter,
)

__all__ = [
    # Version
    "__version__",
    # Middleware
    "create_middleware",
    "StoreCallMiddleware",
    "HostStore",
    "MiddlewareSettings",
    # Core
    "ActionDescriptor",
    "QueryDescriptor",
    "SchemaDescriptor",
    "FilterPredicate",
    "CompiledReference",
    "ResultShape",
    "NormalizedResult",
    "validate_config",
    "parse_filter",
    "compile_query",
    "normalize",
    # Errors
    "ConfigValidationError",
    "FilterSyntaxError",
    "SchemaApplicationError",
    "StoreOperationError",
    # Storage
    "DocumentStore",
    "MemoryStore",
    # Tracing
    "ErrorReporter",
    "ErrorContext",
    "WarningReporter",
    "LoggingReporter",
    "NullReporter",
]
