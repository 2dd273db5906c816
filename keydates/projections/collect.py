"""
Fan-out over many agreements.

Every projection gets its events from ``collect_events``: one
``generate_events`` call per agreement, merged into the canonical order.
This is also where iteration-cap truncation is noticed and logged, since
the engine itself reports nothing.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional

from keydates.recurrence.dates import to_iso_date
from keydates.recurrence.generator import (
    Agreement,
    KeyDateEvent,
    effective_cadence,
    generate_events,
    merge_events,
    renewal_horizon,
)
from keydates.recurrence.horizon import FAST_FORWARD_CAP, WINDOW_CAP
from keydates.utils.config import get_setting

logger = logging.getLogger(__name__)


def horizon_caps(
    fast_forward_cap: Optional[int] = None,
    window_cap: Optional[int] = None,
) -> dict:
    """Resolve iteration caps, falling back to engine_config.yaml."""
    return {
        "fast_forward_cap": fast_forward_cap or get_setting("horizon", "fast_forward_cap", FAST_FORWARD_CAP),
        "window_cap": window_cap or get_setting("horizon", "window_cap", WINDOW_CAP),
    }


def _log_truncation(agreement: Agreement, window_start: date, window_end: date, caps: dict) -> None:
    horizon = renewal_horizon(agreement, window_start, window_end, **caps)
    if horizon is not None and horizon.truncated:
        logger.warning(
            f"Renewal sequence truncated for agreement {agreement.id} "
            f"(cadence={effective_cadence(agreement)} months, "
            f"window={to_iso_date(window_start)}..{to_iso_date(window_end)}, "
            f"caps={caps['fast_forward_cap']}/{caps['window_cap']})"
        )


def collect_events(
    agreements: Iterable[Agreement],
    window_start: date,
    window_end: date,
    fast_forward_cap: Optional[int] = None,
    window_cap: Optional[int] = None,
) -> List[KeyDateEvent]:
    """
    Generate and merge events for a set of agreements.

    Args:
        agreements: Agreement snapshots
        window_start: Inclusive lower bound
        window_end: Inclusive upper bound
        fast_forward_cap: Override for the configured fast-forward cap
        window_cap: Override for the configured window cap

    Returns:
        All events ordered by date, kind and agreement id
    """
    caps = horizon_caps(fast_forward_cap, window_cap)
    batches = []
    for agreement in agreements:
        batches.append(generate_events(agreement, window_start, window_end, **caps))
        _log_truncation(agreement, window_start, window_end, caps)
    return merge_events(batches)
