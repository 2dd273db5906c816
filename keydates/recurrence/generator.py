"""
Key-date event generation.

``generate_events`` is the single canonical source of term-end, renewal and
notice-deadline events. It is pure: the same agreement snapshot and window
always give the same ordered events with the same ids, so callers recompute
on every read or edit instead of patching stored events.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional

from keydates.recurrence.dates import add_days, add_months, days_between, to_iso_date
from keydates.recurrence.horizon import (
    FAST_FORWARD_CAP,
    WINDOW_CAP,
    RenewalHorizon,
    renewal_dates,
)

DEFAULT_CADENCE_MONTHS = 12


class EventKind(str, Enum):
    """Kinds of key-date events, declared in tie-break order."""

    TERM_END = "term_end"
    RENEWAL = "renewal"
    NOTICE_DEADLINE = "notice_deadline"

    @property
    def slug(self) -> str:
        return _KIND_SLUGS[self]

    @property
    def rank(self) -> int:
        return _KIND_ORDER[self]

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_ORDER = {EventKind.TERM_END: 0, EventKind.RENEWAL: 1, EventKind.NOTICE_DEADLINE: 2}
_KIND_SLUGS = {EventKind.TERM_END: "term", EventKind.RENEWAL: "renewal", EventKind.NOTICE_DEADLINE: "notice"}
_KIND_LABELS = {
    EventKind.TERM_END: "Term End",
    EventKind.RENEWAL: "Renewal",
    EventKind.NOTICE_DEADLINE: "Notice Deadline",
}


@dataclass(frozen=True)
class Agreement:
    """
    Immutable snapshot of an agreement as the engine sees it.

    ``end_on`` is the current term end; without it the agreement has no
    events. ``term_months`` is carried for display only, deriving ``end_on``
    from it happens at ingestion.
    """

    id: str
    vendor: str = ""
    title: str = ""
    effective_on: Optional[date] = None
    end_on: Optional[date] = None
    term_months: int = 0
    auto_renews: bool = False
    notice_days: int = 0
    renewal_frequency_months: Optional[int] = None
    owner_id: Optional[str] = None


@dataclass(frozen=True)
class KeyDateEvent:
    """
    One computed key date.

    ``id`` depends only on agreement id, kind and date, so it is stable
    across recomputation. ``renewal_on`` is set on notice deadlines and
    names the renewal they precede.
    """

    agreement_id: str
    kind: EventKind
    occurs_on: date
    vendor: str = ""
    title: str = ""
    renewal_on: Optional[date] = None
    notice_days: int = 0
    id: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "id", event_id(self.agreement_id, self.kind, self.occurs_on))

    def days_until(self, as_of: date) -> int:
        return days_between(self.occurs_on, as_of)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "agreement_id": self.agreement_id,
            "kind": self.kind.value,
            "occurs_on": to_iso_date(self.occurs_on),
            "vendor": self.vendor,
            "title": self.title,
            "renewal_on": to_iso_date(self.renewal_on) if self.renewal_on else None,
        }


def event_id(agreement_id: str, kind: EventKind, occurs_on: date) -> str:
    """Deterministic event id, e.g. ``agr-1-renewal-2026-01-15``."""
    return f"{agreement_id}-{kind.slug}-{to_iso_date(occurs_on)}"


def event_sort_key(event: KeyDateEvent):
    """Date, then kind (term end, renewal, notice deadline), then agreement id."""
    return (event.occurs_on, event.kind.rank, event.agreement_id)


def effective_cadence(agreement: Agreement) -> int:
    """Renewal cadence in months; absent or non-positive means 12."""
    months = agreement.renewal_frequency_months
    if months is None or months <= 0:
        return DEFAULT_CADENCE_MONTHS
    return months


def renewal_horizon(
    agreement: Agreement,
    window_start: date,
    window_end: date,
    fast_forward_cap: int = FAST_FORWARD_CAP,
    window_cap: int = WINDOW_CAP,
) -> Optional[RenewalHorizon]:
    """Renewal horizon for an auto-renewing agreement, None otherwise."""
    if agreement.end_on is None or not agreement.auto_renews:
        return None
    return renewal_dates(
        agreement.end_on,
        effective_cadence(agreement),
        window_start,
        window_end,
        fast_forward_cap=fast_forward_cap,
        window_cap=window_cap,
    )


def _within(value: date, window_start: date, window_end: date) -> bool:
    return window_start <= value <= window_end


def generate_events(
    agreement: Agreement,
    window_start: date,
    window_end: date,
    fast_forward_cap: int = FAST_FORWARD_CAP,
    window_cap: int = WINDOW_CAP,
) -> List[KeyDateEvent]:
    """
    Derive the key-date events of one agreement inside a window.

    Args:
        agreement: Agreement snapshot
        window_start: Inclusive lower bound
        window_end: Inclusive upper bound
        fast_forward_cap: Horizon fast-forward cap
        window_cap: Max renewals enumerated inside the window

    Returns:
        Events ordered by ``event_sort_key``. Never raises for a
        well-formed agreement; odd settings yield fewer events.
    """
    end_on = agreement.end_on
    if end_on is None:
        return []

    events = []
    display = {"vendor": agreement.vendor, "title": agreement.title}

    if _within(end_on, window_start, window_end):
        events.append(KeyDateEvent(agreement.id, EventKind.TERM_END, end_on, **display))

    horizon = renewal_horizon(
        agreement, window_start, window_end,
        fast_forward_cap=fast_forward_cap, window_cap=window_cap,
    )
    if horizon is None:
        return events

    notice_days = agreement.notice_days or 0
    for renewal_on in horizon:
        events.append(KeyDateEvent(agreement.id, EventKind.RENEWAL, renewal_on, **display))
        if notice_days <= 0:
            continue
        try:
            notice_on = add_days(renewal_on, -notice_days)
        except OverflowError:
            continue
        if _within(notice_on, window_start, window_end):
            events.append(KeyDateEvent(
                agreement.id,
                EventKind.NOTICE_DEADLINE,
                notice_on,
                renewal_on=renewal_on,
                notice_days=notice_days,
                **display,
            ))

    events.sort(key=event_sort_key)
    return events


def merge_events(batches: Iterable[List[KeyDateEvent]]) -> List[KeyDateEvent]:
    """Merge per-agreement event lists into one canonically ordered list."""
    merged = [event for batch in batches for event in batch]
    merged.sort(key=event_sort_key)
    return merged


def next_renewal_on(agreement: Agreement, as_of: date) -> Optional[date]:
    """
    First renewal on or after ``as_of``.

    Returns None when the agreement does not auto-renew, has no term end,
    or the fast-forward cap is reached first.
    """
    if agreement.end_on is None or not agreement.auto_renews:
        return None
    cadence = effective_cadence(agreement)
    try:
        window_end = max(agreement.end_on, add_months(as_of, cadence + 1))
    except (OverflowError, ValueError):
        return None
    horizon = renewal_horizon(agreement, as_of, window_end, window_cap=1)
    return next(iter(horizon), None)
