"""Tests for movement date parsing."""

import pytest
from datetime import date, timedelta
from fiscoets.utils.date_parser import parse_date, year_bounds


def test_parse_iso_date():
    """Test parsing ISO dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_italian_date_is_day_first():
    """Test that slashed dates are read day-first."""
    assert parse_date("03/04/2025") == date(2025, 4, 3)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


def test_parse_dotted_date():
    """Test parsing dates with dots."""
    assert parse_date("31.12.2024") == date(2024, 12, 31)


def test_parse_today():
    """Test parsing 'today' and 'oggi'."""
    assert parse_date("today") == date.today()
    assert parse_date("Oggi") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday' and 'ieri'."""
    assert parse_date("yesterday") == date.today() - timedelta(days=1)
    assert parse_date("ieri") == date.today() - timedelta(days=1)


def test_parse_invalid_date():
    """Test that garbage raises ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_year_bounds():
    """Test first and last day of a calendar year."""
    assert year_bounds(2025) == (date(2025, 1, 1), date(2025, 12, 31))
