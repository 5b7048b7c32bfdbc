"""Errors raised by the pure core (validation, filter parsing, normalization).

Store-side failures are raised by store implementations as
``storecall.storage.StoreOperationError``.
"""


class ConfigValidationError(ValueError):
    """Action descriptor is structurally invalid.

    Raised synchronously before any action is dispatched or any store call
    is made. Never converted into a failure action.
    """


class FilterSyntaxError(ConfigValidationError):
    """Filter expression is not of the form ``"field operator value"``."""


class SchemaApplicationError(ValueError):
    """Response could not be normalized with the given schema.

    Raised when an entity has no identifier under the schema key or when the
    schema transform raises.
    """
