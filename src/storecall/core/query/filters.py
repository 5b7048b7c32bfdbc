"""Filter expression parsing.

Usage:
    parse_filter("age >= 18")            # FilterPredicate("age", ">=", 18)
    parse_filter("status == completed")  # FilterPredicate("status", "==", "completed")
    parse_filters(["age >= 18", "status == completed"])

Expressions are split positionally on whitespace, so a value containing
whitespace cannot be expressed.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from storecall.core.errors import FilterSyntaxError
from storecall.core.query.models import FilterPredicate, FilterValue


def coerce_value(token: str) -> FilterValue:
    """Coerce a value token to a number when it is a nonzero decimal literal.

    ``"5"`` becomes ``5`` and ``"2.5"`` becomes ``2.5``. Anything else,
    including ``"0"``, ``"nan"``, ``"inf"`` and non-ASCII digits, is returned
    unchanged as a string.
    """
    if "_" in token or not token.isascii():
        return token
    number: int | float
    try:
        number = int(token)
    except ValueError:
        try:
            number = float(token)
        except ValueError:
            return token
    if not number or math.isnan(number) or math.isinf(number):
        return token
    return number


def parse_filter(expression: str) -> FilterPredicate:
    """Parse one ``"field operator value"`` expression.

    Raises:
        FilterSyntaxError: If the expression is not exactly three tokens.
    """
    if not isinstance(expression, str):
        raise FilterSyntaxError(
            f"Filter expression must be a string, got {type(expression).__name__}"
        )
    tokens = expression.split()
    if len(tokens) != 3:
        raise FilterSyntaxError(
            f"Expected 'field operator value', got {expression!r} ({len(tokens)} tokens)"
        )
    field, operator, value = tokens
    return FilterPredicate(field=field, operator=operator, value=coerce_value(value))


def parse_filters(where: str | Iterable[str] | None) -> tuple[FilterPredicate, ...]:
    """Parse one or many expressions. Predicates are combined with AND."""
    if where is None:
        return ()
    if isinstance(where, str):
        return (parse_filter(where),)
    return tuple(parse_filter(expression) for expression in where)
