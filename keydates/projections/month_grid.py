"""Month grid projection: events of one calendar month keyed by day."""

import calendar
from datetime import date
from typing import Any, Dict, List, Sequence, Tuple

from keydates.projections.collect import collect_events
from keydates.recurrence.generator import Agreement


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def build_month_grid(agreements: Sequence[Agreement], year: int, month: int) -> Dict[str, Any]:
    """
    Events whose date falls in the given month, keyed by day-of-month.

    Days without events are omitted. Events within a day keep the
    canonical order.
    """
    first_day, last_day = month_bounds(year, month)
    days: Dict[int, List[Dict[str, Any]]] = {}
    for event in collect_events(agreements, first_day, last_day):
        days.setdefault(event.occurs_on.day, []).append(event.to_dict())

    return {
        "year": year,
        "month": month,
        "first_weekday": first_day.weekday(),
        "days_in_month": last_day.day,
        "days": days,
    }
