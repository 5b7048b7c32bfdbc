"""Data models for failure reporting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where a store failure happened.

    Attributes:
        failure_type: Failure action type that was dispatched for it.
        method: Wire method name (``get``, ``onSnapshot``, ...).
        reference: Rendered reference chain, e.g. ``store.collection('users')``.
        meta: The descriptor's ``meta`` value.

    Example:
        ErrorContext(
            failure_type="USERS_FAILURE",
            method="get",
            reference="store.collection('users').where('age', '>=', 18)",
        )
    """

    failure_type: str
    method: str
    reference: str
    meta: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary (e.g. for structured log ``extra``)."""
        return {
            "failure_type": self.failure_type,
            "method": self.method,
            "reference": self.reference,
            "meta": self.meta,
        }
