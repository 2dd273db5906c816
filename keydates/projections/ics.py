"""
Calendar feed export (iCalendar text).

Each key date becomes an all-day VEVENT whose DTEND is the day after
DTSTART. UIDs are the event ids, so re-exporting the same agreements gives
the same UIDs and calendar clients update entries instead of duplicating.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from keydates.projections.collect import collect_events
from keydates.recurrence.dates import (
    add_days,
    add_months,
    parse_compact_date,
    to_compact_date,
    to_iso_date,
)
from keydates.recurrence.generator import Agreement, EventKind, KeyDateEvent
from keydates.utils.config import get_setting

CRLF = "\r\n"
DEFAULT_PRODUCT_ID = "-//KeyDates//Renewals//EN"


def _single_line(text: str) -> str:
    return text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def event_summary(event: KeyDateEvent) -> str:
    """Human label, e.g. "Renewal - Acme (Hosting)"."""
    subject = event.vendor or event.agreement_id
    if event.title:
        subject = f"{subject} ({event.title})"
    return f"{event.kind.label} - {subject}"


def event_description(event: KeyDateEvent) -> str:
    if event.kind == EventKind.RENEWAL:
        return "Auto-renewal"
    if event.kind == EventKind.NOTICE_DEADLINE:
        return f"{event.notice_days}-day notice before {to_iso_date(event.renewal_on)}"
    return "End of current term"


def render_event(event: KeyDateEvent) -> List[str]:
    return [
        "BEGIN:VEVENT",
        f"UID:{event.id}",
        f"SUMMARY:{_single_line(event_summary(event))}",
        f"DTSTART;VALUE=DATE:{to_compact_date(event.occurs_on)}",
        f"DTEND;VALUE=DATE:{to_compact_date(add_days(event.occurs_on, 1))}",
        f"DESCRIPTION:{_single_line(event_description(event))}",
        "END:VEVENT",
    ]


def render_calendar(events: Sequence[KeyDateEvent], product_id: Optional[str] = None) -> str:
    """Serialize events as a VCALENDAR document with CRLF line endings."""
    product_id = product_id or get_setting("feed", "product_id", DEFAULT_PRODUCT_ID)
    lines = ["BEGIN:VCALENDAR", "VERSION:2.0", f"PRODID:{product_id}"]
    for event in events:
        lines.extend(render_event(event))
    lines.append("END:VCALENDAR")
    return CRLF.join(lines)


def build_feed(
    agreements: Sequence[Agreement],
    as_of: date,
    horizon_months: Optional[int] = None,
) -> str:
    """
    Calendar feed for the window [as_of, as_of + horizon_months].

    Args:
        agreements: Agreement snapshots
        as_of: First day of the feed window
        horizon_months: Feed length; defaults to feed.horizon_months

    Returns:
        iCalendar text
    """
    horizon_months = horizon_months or get_setting("feed", "horizon_months", 12)
    events = collect_events(agreements, as_of, add_months(as_of, horizon_months))
    return render_calendar(events)


def parse_ics(text: str) -> List[Dict[str, Any]]:
    """
    Read VEVENT blocks back from iCalendar text.

    Only the properties written by ``render_event`` are read; DTSTART and
    DTEND come back as dates.
    """
    events = []
    current: Optional[Dict[str, Any]] = None
    for line in text.splitlines():
        if line == "BEGIN:VEVENT":
            current = {}
        elif line == "END:VEVENT":
            if current is not None:
                events.append(current)
            current = None
        elif current is not None and ":" in line:
            name, value = line.split(":", 1)
            prop = name.split(";", 1)[0].lower()
            if prop in ("dtstart", "dtend"):
                current[prop] = parse_compact_date(value)
            else:
                current[prop] = value
    return events
