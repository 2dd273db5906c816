"""Daily digest: one summary row per agreement, grouped by owner."""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from keydates.recurrence.dates import days_between, to_iso_date
from keydates.recurrence.generator import Agreement, next_renewal_on


def _iso_or_none(value: Optional[date]) -> Optional[str]:
    return to_iso_date(value) if value else None


def digest_row(agreement: Agreement, as_of: date) -> Dict[str, Any]:
    next_renewal = next_renewal_on(agreement, as_of)
    return {
        "agreement_id": agreement.id,
        "vendor": agreement.vendor,
        "title": agreement.title,
        "effective_on": _iso_or_none(agreement.effective_on),
        "end_on": _iso_or_none(agreement.end_on),
        "auto_renews": agreement.auto_renews,
        "notice_days": agreement.notice_days,
        "next_renewal": _iso_or_none(next_renewal),
        "days_until": days_between(next_renewal, as_of) if next_renewal else None,
    }


def build_daily_digest(agreements: Sequence[Agreement], as_of: date) -> List[Dict[str, Any]]:
    """
    Per-owner digest of every agreement, rows sorted by vendor.

    Agreements without an owner are skipped.
    """
    per_owner: Dict[str, List[Agreement]] = {}
    for agreement in agreements:
        if agreement.owner_id:
            per_owner.setdefault(agreement.owner_id, []).append(agreement)

    return [
        {
            "owner_id": owner_id,
            "as_of": to_iso_date(as_of),
            "rows": [
                digest_row(agreement, as_of)
                for agreement in sorted(rows, key=lambda a: (a.vendor.lower(), a.title.lower(), a.id))
            ],
        }
        for owner_id, rows in sorted(per_owner.items())
    ]
