"""Row serialization into SQL literals.

Values are first classified into a closed set of kinds, then rendered by
the formatter registered for that kind.  Escaping is deliberately
minimal: single quotes in text are doubled and nothing else is touched.
The script is meant to be replayed into PostgreSQL with
``standard_conforming_strings`` on, where backslashes are literal.

Usage:
    >>> format_value("O'Brien")
    "'O''Brien'"
    >>> format_value(None)
    'NULL'
    >>> format_column_list({"id": 1, "name": "Al"})
    '"id", "name"'
"""

import math
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable

from db_backup.backup.naming import isoformat_utc


class ValueKind(str, Enum):
    """Closed set of value kinds a row can carry."""

    NULL = "null"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    RAW = "raw"


def classify_value(value: Any) -> ValueKind:
    """Determine the kind of a row value."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, str):
        return ValueKind.TEXT
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, (datetime, date)):
        return ValueKind.TIMESTAMP
    return ValueKind.RAW


def quote_text(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def format_number(value: int | float | Decimal) -> str:
    """``str()`` for finite numbers; NaN and infinities as quoted literals."""
    if isinstance(value, Decimal):
        if value.is_nan():
            return "'NaN'"
        if value.is_infinite():
            return "'-Infinity'" if value.is_signed() else "'Infinity'"
    elif isinstance(value, float):
        if math.isnan(value):
            return "'NaN'"
        if math.isinf(value):
            return "'-Infinity'" if value < 0 else "'Infinity'"
    return str(value)


def format_raw(value: Any) -> str:
    """Binary data as a bytea hex literal; anything else via ``str()``."""
    if isinstance(value, (bytes, bytearray)):
        return f"'\\x{bytes(value).hex()}'"
    return str(value)


_FORMATTERS: dict[ValueKind, Callable[[Any], str]] = {
    ValueKind.NULL: lambda _: "NULL",
    ValueKind.TEXT: quote_text,
    ValueKind.NUMBER: format_number,
    ValueKind.BOOLEAN: lambda v: "true" if v else "false",
    ValueKind.TIMESTAMP: lambda v: f"'{isoformat_utc(v)}'",
    ValueKind.RAW: format_raw,
}


def format_value(value: Any) -> str:
    """Render one value as a SQL literal.

    - ``None`` -> ``NULL``
    - text -> single-quoted with embedded quotes doubled
    - datetime/date -> quoted ISO-8601, UTC, millisecond precision, ``Z``
    - bool -> ``true`` / ``false``; numbers -> their ``str()`` form, except
      NaN and infinities, which become ``'NaN'`` / ``'Infinity'`` /
      ``'-Infinity'``
    - bytes -> bytea hex literal ``'\\x...'``
    - anything else -> ``str(value)`` unchanged
    """
    return _FORMATTERS[classify_value(value)](value)


def format_values(row: dict[str, Any]) -> str:
    """Render a row's values, comma-separated, in key order."""
    return ", ".join(format_value(v) for v in row.values())


def format_column_list(row: dict[str, Any]) -> str:
    """Double-quote each column name of a row, comma-separated, in key order."""
    return ", ".join(f'"{name}"' for name in row)
