"""
Key-date rows for a denormalized store.

Consumers that keep a key-dates table replace all rows of an agreement with
``build_key_dates`` output after every edit. The rows are a disposable copy
of the generator's output, never patched in place.
"""

from datetime import date
from typing import Dict, List, Optional

from keydates.projections.collect import collect_events
from keydates.recurrence.dates import add_months, to_iso_date
from keydates.recurrence.generator import Agreement
from keydates.utils.config import get_setting


def build_key_dates(
    agreement: Agreement,
    as_of: date,
    months_ahead: Optional[int] = None,
) -> List[Dict[str, str]]:
    """
    Rows of (agreement_id, event_kind, occurs_on, event_id) from ``as_of``
    to ``as_of + months_ahead`` months.
    """
    months_ahead = months_ahead or get_setting("key_dates", "months_ahead", 60)
    window_cap = get_setting("key_dates", "window_cap", 120)
    events = collect_events([agreement], as_of, add_months(as_of, months_ahead), window_cap=window_cap)
    return [
        {
            "agreement_id": event.agreement_id,
            "event_kind": event.kind.value,
            "occurs_on": to_iso_date(event.occurs_on),
            "event_id": event.id,
        }
        for event in events
    ]
