"""
Test suite for sql.literals module.

Tests cover:
- format_value: one rendering per supported value kind
- quote_literal / quote_list: unescaped single quoting
- render_condition: equality, BETWEEN and IN selection
- current_timestamp: UTC clock with configured strftime format
"""

import time
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest

from sql.literals import (
    current_timestamp,
    format_value,
    quote_list,
    quote_literal,
    render_condition,
)

# ============================================================================
# UNIT TESTS - format_value
# ============================================================================


@pytest.mark.unit
@pytest.mark.parametrize("value,expected", [
    ("abc", "abc"),
    (7, "7"),
    (1.5, "1.5"),
    (1.0, "1"),
    (-3.0, "-3"),
    (Decimal("2.50"), "2.50"),
    (True, "true"),
    (False, "false"),
    (date(2024, 1, 2), "2024-01-02"),
    (None, "null"),
])
def test_format_value_variants(value, expected):
    """Test each supported value kind renders its literal text."""
    assert format_value(value) == expected


@pytest.mark.unit
def test_format_value_datetime_uses_format():
    """Test datetimes are rendered with the given strftime format."""
    moment = datetime(2024, 1, 2, 3, 4, 5)
    assert format_value(moment, '%Y-%m-%d %H:%M:%S') == "2024-01-02 03:04:05"
    assert format_value(moment, '%d/%m/%Y') == "02/01/2024"


@pytest.mark.unit
def test_format_value_falls_back_to_str():
    """Test unknown objects are stringified without validation."""
    class Token:
        def __str__(self):
            return "tok"

    assert format_value(Token()) == "tok"


# ============================================================================
# UNIT TESTS - Quoting
# ============================================================================


@pytest.mark.unit
def test_quote_literal_does_not_escape():
    """Test embedded quotes are left as-is."""
    assert quote_literal("it's") == "'it's'"


@pytest.mark.unit
def test_quote_list():
    """Test values are quoted and comma-separated."""
    assert quote_list([1, "b", True]) == "'1', 'b', 'true'"


# ============================================================================
# UNIT TESTS - render_condition
# ============================================================================


@pytest.mark.unit
def test_render_condition_equality():
    """Test scalars render as equality."""
    assert render_condition("a", 7) == "a = '7'"


@pytest.mark.unit
@pytest.mark.parametrize("value", [[1, 5], (1, 5)])
def test_render_condition_between(value):
    """Test two-element lists and tuples render BETWEEN."""
    assert render_condition("a", value) == "a BETWEEN '1' AND '5'"


@pytest.mark.unit
def test_render_condition_in():
    """Test longer sequences render IN."""
    assert render_condition("a", ["x", "y", "z"]) == "a IN ('x', 'y', 'z')"


@pytest.mark.edge_case
@pytest.mark.parametrize("value,expected", [
    ([], "a = ''"),
    ([9], "a = '9'"),
])
def test_render_condition_short_sequences(value, expected):
    """Test empty and single-element sequences fall through to equality."""
    assert render_condition("a", value) == expected


# ============================================================================
# UNIT TESTS - current_timestamp
# ============================================================================


@pytest.mark.unit
def test_current_timestamp_format():
    """Test the clock reads UTC and applies the given format."""
    with patch("sql.literals.datetime") as mock_datetime:
        mock_datetime.now.return_value = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)
        assert current_timestamp('%Y-%m-%d %H:%M:%S') == "2024-05-01 12:30:00"
        mock_datetime.now.assert_called_with(timezone.utc)
        assert current_timestamp('%Y') == "2024"


@pytest.mark.regression
def test_current_timestamp_is_utc_not_local(monkeypatch):
    """Test stamps follow UTC whatever the process timezone is."""
    if not hasattr(time, "tzset"):
        pytest.skip("tzset not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    try:
        fmt = '%Y-%m-%d %H'
        before = datetime.now(timezone.utc).strftime(fmt)
        stamp = current_timestamp(fmt)
        after = datetime.now(timezone.utc).strftime(fmt)
        assert stamp in (before, after)
    finally:
        monkeypatch.undo()
        time.tzset()
