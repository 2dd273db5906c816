"""Recurrence engine: date arithmetic, renewal horizon and event generation."""

from keydates.recurrence.dates import (
    InvalidDateError,
    add_days,
    add_months,
    add_months_clamped,
    days_between,
    parse_iso_date,
    to_iso_date,
)
from keydates.recurrence.horizon import RenewalHorizon, renewal_dates
from keydates.recurrence.generator import (
    Agreement,
    EventKind,
    KeyDateEvent,
    effective_cadence,
    event_id,
    generate_events,
    merge_events,
    next_renewal_on,
)

__all__ = [
    "InvalidDateError",
    "add_days",
    "add_months",
    "add_months_clamped",
    "days_between",
    "parse_iso_date",
    "to_iso_date",
    "RenewalHorizon",
    "renewal_dates",
    "Agreement",
    "EventKind",
    "KeyDateEvent",
    "effective_cadence",
    "event_id",
    "generate_events",
    "merge_events",
    "next_renewal_on",
]
