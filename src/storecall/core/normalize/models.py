"""Normalized response model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class NormalizedResult:
    """Entities keyed by id under their schema name, plus ids in response order.

    Example:
        NormalizedResult(
            entities={"users": {1: {"_id": 1, "firstName": "tina"}}},
            ids=[1],
        )
    """

    entities: dict[str, dict[Any, Any]] = field(default_factory=dict)
    ids: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain ``{"entities": ..., "ids": ...}`` mapping."""
        return {"entities": self.entities, "ids": self.ids}
