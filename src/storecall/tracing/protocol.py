"""Protocol for failure reporting.

The middleware has no global output channel of its own; every store failure
goes to an injected ErrorReporter before the failure action is dispatched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from storecall.tracing.models import ErrorContext


@runtime_checkable
class ErrorReporter(Protocol):
    """Sink for store errors. Diagnostic only; never affects control flow.

    Example implementations:
        - WarningReporter: ``warnings.warn`` (default)
        - LoggingReporter: stdlib ``logging``
        - NullReporter: discard

    Usage:
        class SentryReporter:
            def report(self, error: BaseException, context: ErrorContext) -> None:
                sentry_sdk.capture_exception(error)

        middleware = create_middleware(store, reporter=SentryReporter())
    """

    def report(self, error: BaseException, context: ErrorContext) -> None:
        """Receive the raw error of a failed store call.

        Args:
            error: Exception raised (or delivered) by the store.
            context: Which invocation failed.
        """
        ...
