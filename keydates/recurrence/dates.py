"""
Calendar-date arithmetic for the recurrence engine.

All values are plain ``datetime.date`` objects: no time of day, no timezone.

Month arithmetic uses Gregorian rollover rather than clamping. Adding one
month to Jan 31 asks for "Feb 31", which rolls forward by the overflow:
2025-01-31 + 1 month is 2025-03-03, and in the leap year 2024 it is
2024-03-02. Term-end derivation at ingestion clamps to the month end
instead, via ``add_months_clamped``.
"""

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Union

ISO_DATE_PATTERN = re.compile(r'^[0-9]{4}-[0-9]{2}-[0-9]{2}$')

DateLike = Union[date, datetime]


class InvalidDateError(ValueError):
    """Raised when a string is not a real yyyy-mm-dd calendar date."""
    pass


def add_months(value: date, months: int) -> date:
    """
    Shift a date by whole months, rolling day-of-month overflow forward.

    Args:
        value: Starting date
        months: Number of months to add

    Returns:
        The shifted date
    """
    total = value.month - 1 + months
    year = value.year + total // 12
    month = total % 12 + 1
    return date(year, month, 1) + timedelta(days=value.day - 1)


def add_months_clamped(value: date, months: int) -> date:
    """
    Shift a date by whole months, clamping to the last day of the target
    month (2024-01-31 + 1 month is 2024-02-29).

    Used only when deriving a term end at ingestion; renewal recurrence
    always goes through ``add_months``.
    """
    total = value.month - 1 + months
    year = value.year + total // 12
    month = total % 12 + 1
    return date(year, month, min(value.day, calendar.monthrange(year, month)[1]))


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def _as_date(value: DateLike) -> date:
    # datetime subclasses date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(a: DateLike, b: DateLike) -> int:
    """
    Whole calendar days from ``b`` to ``a`` (``a - b``).

    Any time-of-day component is dropped first, so two values on the same
    calendar day are always 0 apart.
    """
    return (_as_date(a) - _as_date(b)).days


def to_iso_date(value: date) -> str:
    """Format as yyyy-mm-dd."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def to_compact_date(value: date) -> str:
    """Format as yyyymmdd (calendar feed DATE values)."""
    return f"{value.year:04d}{value.month:02d}{value.day:02d}"


def parse_iso_date(text: str) -> date:
    """
    Parse a strict yyyy-mm-dd string.

    Args:
        text: Date string

    Returns:
        Parsed date

    Raises:
        InvalidDateError: If the text is not a real calendar date in
            yyyy-mm-dd form
    """
    if not isinstance(text, str) or not ISO_DATE_PATTERN.match(text.strip()):
        raise InvalidDateError(f"Expected a yyyy-mm-dd date, got {text!r}")
    try:
        year, month, day = (int(part) for part in text.strip().split("-"))
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateError(f"Invalid calendar date {text!r}: {e}") from e


def parse_compact_date(text: str) -> date:
    """Parse a yyyymmdd string."""
    text = text.strip()
    if len(text) != 8 or not text.isdigit():
        raise InvalidDateError(f"Expected a yyyymmdd date, got {text!r}")
    return parse_iso_date(f"{text[:4]}-{text[4:6]}-{text[6:]}")
