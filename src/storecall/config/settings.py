"""Configuration settings using Pydantic Settings.

Provides typed middleware configuration with environment variable support.

Usage:
    from storecall.config import MiddlewareSettings

    # Load from environment variables (STORECALL_*)
    settings = MiddlewareSettings()

    # Or override with explicit values
    settings = MiddlewareSettings(marker="CALL_FIRESTORE", default_key="_id")
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class MiddlewareSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the store-call middleware.

    Attributes:
        marker: Action key whose value is the action descriptor.
        default_key: Entity id field used when a schema names no key.
        report_failures: Send store failures to the ErrorReporter.

    Environment Variables:
        STORECALL_MARKER
        STORECALL_DEFAULT_KEY
        STORECALL_REPORT_FAILURES
    """

    model_config = SettingsConfigDict(
        env_prefix="STORECALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    marker: str = "CALL_STORE"
    default_key: str = "id"
    report_failures: bool = True
