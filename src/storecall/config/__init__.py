"""Configuration module using Pydantic Settings.

Usage:
    from storecall.config import MiddlewareSettings

    settings = MiddlewareSettings(marker="CALL_FIRESTORE")
"""

from storecall.config.settings import MiddlewareSettings

__all__ = [
    "MiddlewareSettings",
]
