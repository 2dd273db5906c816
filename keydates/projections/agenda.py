"""
Agenda projection: upcoming events relative to a reference date, grouped
into buckets, plus a per-vendor summary.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from keydates.projections.collect import collect_events
from keydates.recurrence.dates import add_months, to_iso_date
from keydates.recurrence.generator import Agreement, KeyDateEvent
from keydates.utils.config import get_setting

BUCKET_TODAY = "today"
BUCKET_NEXT_30 = "0-30d"
BUCKET_NEXT_60 = "31-60d"
BUCKET_LATER = "61+d"

BUCKETS = (BUCKET_TODAY, BUCKET_NEXT_30, BUCKET_NEXT_60, BUCKET_LATER)


def bucket_for(days_until: int) -> str:
    """Bucket for a non-negative day delta. Day 0 goes to "today" only."""
    if days_until == 0:
        return BUCKET_TODAY
    if days_until <= 30:
        return BUCKET_NEXT_30
    if days_until <= 60:
        return BUCKET_NEXT_60
    return BUCKET_LATER


def agenda_item(event: KeyDateEvent, agreement: Agreement, as_of: date) -> Dict[str, Any]:
    days_until = event.days_until(as_of)
    return {
        **event.to_dict(),
        "date": to_iso_date(event.occurs_on),
        "days_until": days_until,
        "bucket": bucket_for(days_until),
        "auto_renews": agreement.auto_renews,
        "notice_days": agreement.notice_days,
    }


def summarize_vendors(items: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Per-vendor summary of agenda items.

    Returns:
        One entry per vendor with the number of distinct agreements that
        have upcoming events and the earliest upcoming date, sorted by
        vendor name (case-insensitive).
    """
    vendors: Dict[str, Dict[str, Any]] = {}
    for item in items:
        entry = vendors.setdefault(item["vendor"], {"agreements": set(), "next_deadline": None})
        entry["agreements"].add(item["agreement_id"])
        if entry["next_deadline"] is None or item["date"] < entry["next_deadline"]:
            entry["next_deadline"] = item["date"]

    return [
        {
            "name": name,
            "active_contracts": len(entry["agreements"]),
            "next_deadline": entry["next_deadline"],
        }
        for name, entry in sorted(vendors.items(), key=lambda kv: (kv[0].lower(), kv[0]))
    ]


def build_agenda(
    agreements: Sequence[Agreement],
    as_of: date,
    horizon_months: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the agenda view.

    Args:
        agreements: Agreement snapshots
        as_of: Reference date ("today")
        horizon_months: Months ahead to look; defaults to agenda.horizon_months

    Returns:
        Dict with the ordered items, items grouped per bucket and the
        vendor summary
    """
    horizon_months = horizon_months or get_setting("agenda", "horizon_months", 12)
    window_end = add_months(as_of, horizon_months)
    by_id = {agreement.id: agreement for agreement in agreements}

    items = [
        agenda_item(event, by_id[event.agreement_id], as_of)
        for event in collect_events(agreements, as_of, window_end)
        if event.days_until(as_of) >= 0
    ]
    # collect_events already orders by date, so this keeps kind/id ties stable
    items.sort(key=lambda item: item["days_until"])

    buckets: Dict[str, List[Dict[str, Any]]] = {name: [] for name in BUCKETS}
    for item in items:
        buckets[item["bucket"]].append(item)

    return {
        "as_of": to_iso_date(as_of),
        "window_end": to_iso_date(window_end),
        "items": items,
        "buckets": buckets,
        "vendors": summarize_vendors(items),
    }
