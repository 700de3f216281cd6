"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser


def parse_date(date_str: str) -> date:
    """Parse a movement date.

    Supports:
    - ISO dates: "2024-01-15"
    - Italian day-first dates: "15/01/2024", "15-01-2024", "15.01.2024"
    - Relative dates: "today"/"oggi", "yesterday"/"ieri"

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "oggi": today,
        "yesterday": today - timedelta(days=1),
        "ieri": today - timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # ISO dates are year-first, everything else is read day-first
    yearfirst = len(date_str) >= 4 and date_str[:4].isdigit()

    try:
        dt = date_parser.parse(date_str, dayfirst=not yearfirst, yearfirst=yearfirst)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def year_bounds(year: int) -> tuple[date, date]:
    """Return the first and last day of a calendar year."""
    return (date(year, 1, 1), date(year, 12, 31))
