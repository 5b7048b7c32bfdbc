"""Store-call middleware and host pipeline types."""

from storecall.middleware.core import StoreCallMiddleware, create_middleware
from storecall.middleware.models import Action, Dispatch, HostStore, Middleware

__all__ = [
    "StoreCallMiddleware",
    "create_middleware",
    "Action",
    "Dispatch",
    "HostStore",
    "Middleware",
]
