"""
Reminder selection.

A reminder fires for an event when the run date is exactly one of the
configured offsets before it (by default 90, 60, 30 days, and the same day).
"""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from keydates.projections.collect import collect_events
from keydates.recurrence.dates import add_days, to_iso_date
from keydates.recurrence.generator import Agreement, KeyDateEvent
from keydates.utils.config import get_setting

DEFAULT_OFFSETS = (0, 30, 60, 90)


def reminder_offsets(offsets: Optional[Iterable[int]] = None) -> List[int]:
    """Sorted, de-duplicated, non-negative offsets (config default)."""
    if offsets is None:
        offsets = get_setting("reminders", "offsets", list(DEFAULT_OFFSETS))
    return sorted({int(offset) for offset in offsets if int(offset) >= 0})


def select_reminders(
    events: Iterable[KeyDateEvent],
    as_of: date,
    offsets: Optional[Iterable[int]] = None,
) -> List[KeyDateEvent]:
    """Events whose distance from ``as_of`` is exactly one of the offsets."""
    wanted = set(reminder_offsets(offsets))
    return [event for event in events if event.days_until(as_of) in wanted]


def reminder_item(event: KeyDateEvent, as_of: date) -> Dict[str, Any]:
    return {
        "event_id": event.id,
        "agreement_id": event.agreement_id,
        "vendor": event.vendor,
        "title": event.title,
        "kind": event.kind.value,
        "label": event.kind.label,
        "on": to_iso_date(event.occurs_on),
        "in_days": event.days_until(as_of),
    }


def build_reminder_digests(
    agreements: Sequence[Agreement],
    as_of: date,
    offsets: Optional[Iterable[int]] = None,
) -> List[Dict[str, Any]]:
    """
    Group today's reminders per agreement owner.

    Agreements without an owner are skipped. Owners with nothing due are
    not included.

    Returns:
        One digest per owner, ordered by owner id, with items ordered by
        days until the event
    """
    offsets = reminder_offsets(offsets)
    if not offsets:
        return []

    owned = [agreement for agreement in agreements if agreement.owner_id]
    owners = {agreement.id: agreement.owner_id for agreement in owned}
    events = collect_events(owned, as_of, add_days(as_of, max(offsets)))

    per_owner: Dict[str, List[Dict[str, Any]]] = {}
    for event in select_reminders(events, as_of, offsets):
        per_owner.setdefault(owners[event.agreement_id], []).append(reminder_item(event, as_of))

    return [
        {
            "owner_id": owner_id,
            "as_of": to_iso_date(as_of),
            "items": sorted(items, key=lambda item: item["in_days"]),
        }
        for owner_id, items in sorted(per_owner.items())
    ]
