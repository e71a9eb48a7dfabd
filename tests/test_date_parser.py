"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from ledgerbook.utils.date_parser import parse_date, get_date_range

REFERENCE = date(2024, 3, 15)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_relative_days():
    assert parse_date("yesterday", today=REFERENCE) == date(2024, 3, 14)
    assert parse_date("Tomorrow", today=REFERENCE) == date(2024, 3, 16)


def test_parse_relative_periods():
    """Relative periods resolve to the first day of the period."""
    assert parse_date("this month", today=REFERENCE) == date(2024, 3, 1)
    assert parse_date("last month", today=REFERENCE) == date(2024, 2, 1)
    assert parse_date("this year", today=REFERENCE) == date(2024, 1, 1)
    assert parse_date("last year", today=REFERENCE) == date(2023, 1, 1)


def test_parse_last_month_in_january():
    assert parse_date("last month", today=date(2024, 1, 10)) == date(2023, 12, 1)


def test_parse_invalid_date():
    """Test parsing invalid date raises ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_get_date_range_this_month():
    assert get_date_range("this-month", today=REFERENCE) == (date(2024, 3, 1), REFERENCE)


def test_get_date_range_last_month():
    """Last month ends on the day before the first of this month."""
    assert get_date_range("last-month", today=REFERENCE) == (date(2024, 2, 1), date(2024, 2, 29))


def test_get_date_range_last_year():
    assert get_date_range("last-year", today=REFERENCE) == (date(2023, 1, 1), date(2023, 12, 31))


def test_get_date_range_this_year_defaults_to_today():
    start, end = get_date_range("this-year")
    assert start == date.today().replace(month=1, day=1)
    assert end == date.today()
    assert end - start >= timedelta(days=0)


def test_get_date_range_unknown():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")
