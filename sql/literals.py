"""
=========================
SQL Literal Formatting.
=========================

This module turns Python values into the literal text interpolated by the
statement builder. Values are inserted verbatim between single quotes, with
no escaping and no parameter binding.

Supported value kinds:
- str: used unchanged
- bool: rendered as true / false
- int, float, Decimal: rendered with str(), whole floats without '.0'
- datetime: rendered with the configured timestamp format
- date: rendered as YYYY-MM-DD
- None: rendered as null

Any other object falls back to str().

Usage:
    from sql.literals import quote_literal, render_condition

    quote_literal(42)                          # "'42'"
    render_condition('age', [18, 65])          # "age BETWEEN '18' AND '65'"
    render_condition('status', ['a', 'b', 'c'])  # "status IN ('a', 'b', 'c')"
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from core.config import config


def _format_bool(value: bool) -> str:
    return 'true' if value else 'false'


def _format_number(value) -> str:
    # Whole floats render without a fractional part
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_datetime(value: datetime, timestamp_format: Optional[str] = None) -> str:
    return value.strftime(timestamp_format or config.timestamp_format)


def _format_date(value: date) -> str:
    return value.isoformat()


def format_value(value: Any, timestamp_format: Optional[str] = None) -> str:
    """
    Render a scalar value as unquoted literal text.

    Args:
        value: Value to render
        timestamp_format: strftime format for datetimes, defaults to config

    Returns:
        Literal text of the value
    """
    if isinstance(value, str):
        return value
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return _format_bool(value)
    if isinstance(value, (int, float, Decimal)):
        return _format_number(value)
    # datetime is a subclass of date
    if isinstance(value, datetime):
        return _format_datetime(value, timestamp_format)
    if isinstance(value, date):
        return _format_date(value)
    if value is None:
        return 'null'
    return str(value)


def quote_literal(value: Any) -> str:
    """Wrap a value in single quotes. The value is not escaped."""
    return f"'{format_value(value)}'"


def quote_list(values: Iterable[Any]) -> str:
    """Render values as a comma-separated list of quoted literals."""
    return ", ".join(quote_literal(v) for v in values)


def render_condition(column: str, value: Any) -> str:
    """
    Render one column/value pair of a where mapping.

    A two-element list or tuple becomes a BETWEEN range, a longer one an IN
    list. Everything else, including empty and single-element sequences, is
    compared with equality.

    Args:
        column: Column expression, inserted verbatim
        value: Scalar or sequence of scalars

    Returns:
        Predicate fragment without surrounding parentheses
    """
    if isinstance(value, (list, tuple)) and len(value) == 2:
        start, end = value
        return f"{column} BETWEEN {quote_literal(start)} AND {quote_literal(end)}"
    elif isinstance(value, (list, tuple)) and len(value) > 2:
        return f"{column} IN ({quote_list(value)})"
    return f"{column} = {quote_literal(_join_short_sequence(value))}"


def _join_short_sequence(value: Any) -> Any:
    # Empty and single-element sequences compare against their joined text
    if isinstance(value, (list, tuple)):
        return ",".join(format_value(v) for v in value)
    return value


def current_timestamp(timestamp_format: Optional[str] = None) -> str:
    """
    Get the current UTC time as stamp text.

    Args:
        timestamp_format: strftime format, defaults to config.timestamp_format

    Returns:
        Formatted timestamp, e.g. '2024-05-01 12:30:00'
    """
    return datetime.now(timezone.utc).strftime(timestamp_format or config.timestamp_format)
