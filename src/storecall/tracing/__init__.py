"""Failure reporting for store calls.

Usage:
    from storecall.tracing import ErrorReporter, LoggingReporter

    middleware = create_middleware(store, reporter=LoggingReporter())
"""

from storecall.tracing.models import ErrorContext
from storecall.tracing.protocol import ErrorReporter
from storecall.tracing.reporters import (
    LoggingReporter,
    NullReporter,
    StoreCallWarning,
    WarningReporter,
)

__all__ = [
    "ErrorReporter",
    "ErrorContext",
    "WarningReporter",
    "LoggingReporter",
    "NullReporter",
    "StoreCallWarning",
]
