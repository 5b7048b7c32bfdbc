"""Host pipeline types.

The host is a Redux-style dispatch pipeline:

    middleware(host)(next_)(action)

where ``host.get_state()`` returns the current state and ``next_`` forwards
an action to the rest of the pipeline.
"""

from __future__ import annotations

from collections.abc import Callable, MutableMapping
from typing import Any, Protocol, runtime_checkable

Action = MutableMapping[str, Any]
Dispatch = Callable[[Action], Any]
Middleware = Callable[["HostStore"], Callable[[Dispatch], Dispatch]]


@runtime_checkable
class HostStore(Protocol):
    """The host pipeline's state container, as seen by a middleware."""

    def get_state(self) -> Any:
        """Current host state (passed to ``bailout``)."""
        ...
