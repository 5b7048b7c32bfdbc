"""Built-in ErrorReporter implementations."""

from __future__ import annotations

import logging
import warnings

from storecall.tracing.models import ErrorContext


class StoreCallWarning(RuntimeWarning):
    """Warning category used by WarningReporter."""


class WarningReporter:
    """Emit each store failure as a ``StoreCallWarning``."""

    def report(self, error: BaseException, context: ErrorContext) -> None:
        warnings.warn(
            f"{context.failure_type}: {context.method} on {context.reference} failed: "
            f"{type(error).__name__}: {error}",
            StoreCallWarning,
            stacklevel=2,
        )


class LoggingReporter:
    """Log each store failure at WARNING with the traceback attached.

    Args:
        logger: Logger to use. Defaults to the ``storecall`` logger.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("storecall")

    def report(self, error: BaseException, context: ErrorContext) -> None:
        self.logger.warning(
            "%s: %s on %s failed",
            context.failure_type,
            context.method,
            context.reference,
            exc_info=(type(error), error, error.__traceback__),
            extra={"storecall": context.to_dict()},
        )


class NullReporter:
    """Discard failures."""

    def report(self, error: BaseException, context: ErrorContext) -> None:
        return None
