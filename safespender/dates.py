"""Date utilities for safespender.

Pure functions for calendar-month arithmetic and date parsing. Every date is
a timezone-naive ``datetime.date``; nothing here looks at the clock.
"""

import calendar
from collections.abc import Iterator
from datetime import date, datetime

import pandas as pd

from safespender.domain.models import Month

# Recurring bills never land after the 28th in February, leap year or not.
FEBRUARY_BILL_CAP = 28


def month_range(month: Month) -> tuple[date, date, str]:
    """Calculate the inclusive date range and label for a month.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Tuple of (first_day, last_day, label) where:
        - first_day: First day of the month
        - last_day: Last day of the month
        - label: Human-readable month (e.g., "January 2025")

    Raises:
        ValueError: If the month is not in YYYY-MM format.
    """
    dt = datetime.strptime(month, "%Y-%m")
    first_day = date(dt.year, dt.month, 1)
    last_day = date(dt.year, dt.month, days_in_month(dt.year, dt.month))
    label = dt.strftime("%B %Y")
    return first_day, last_day, label


def month_of(day: date) -> Month:
    """Return the YYYY-MM month containing a date."""
    return Month(day.strftime("%Y-%m"))


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(year: int, month: int, count: int) -> tuple[int, int]:
    """Shift a (year, month) pair by a number of months (may be negative)."""
    index = year * 12 + (month - 1) + count
    return index // 12, index % 12 + 1


def clip_day(year: int, month: int, day: int) -> date:
    """Build a date, moving days past the end of the month to its last day."""
    return date(year, month, min(day, days_in_month(year, month)))


def clip_bill_day(year: int, month: int, day: int) -> date:
    """Build a recurring bill date.

    Same as clip_day except February always stops at the 28th, so a bill on
    the 29th, 30th or 31st falls on February 28th even in a leap year.
    """
    if month == 2:
        return date(year, month, min(day, FEBRUARY_BILL_CAP))
    return clip_day(year, month, day)


def iter_months(start: date, end: date) -> Iterator[tuple[int, int]]:
    """Yield every (year, month) from start's month through end's month."""
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield year, month
        year, month = add_months(year, month, 1)


def end_of_month(day: date) -> date:
    return date(day.year, day.month, days_in_month(day.year, day.month))


def parse_date(raw: str) -> date:
    """Parse a user-supplied date.

    ISO dates (YYYY-MM-DD) are taken as-is. Anything else goes through
    pandas.to_datetime with day-first parsing, so "25/01/2025" and
    "25 Jan 2025" both work.

    Args:
        raw: Date text.

    Returns:
        The calendar date.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    text = raw.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        parsed = pd.to_datetime(text, dayfirst=True)
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw}': {e}") from e
    if pd.isna(parsed):
        raise ValueError(f"Could not parse date '{raw}'")
    return parsed.date()
