"""
Renewal horizon iteration.

Walks a renewal cursor forward from an anchor date by a fixed monthly
cadence and yields the cursor positions that fall inside a window. Every
surface that needs renewal dates goes through ``RenewalHorizon``; none of
them advance their own cursor.

Iteration caps:
    The walk is bounded twice. Fast-forwarding from the anchor to the window
    start stops after ``fast_forward_cap`` steps, and at most ``window_cap``
    dates are yielded inside the window. Hitting either cap truncates the
    sequence silently. Nothing is raised and the yielded dates are simply
    fewer; ``RenewalHorizon.truncated`` reports whether that happened so the
    orchestration layer can log it.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterator, Optional, Tuple

from keydates.recurrence.dates import add_months

FAST_FORWARD_CAP = 120
WINDOW_CAP = 36


@dataclass(frozen=True)
class RenewalHorizon:
    """
    Lazy, restartable sequence of renewal dates inside a window.

    Each call to ``iter()`` starts a fresh walk from ``anchor``; no cursor
    state is shared between iterations.

    Attributes:
        anchor: First renewal candidate (the agreement's term end)
        cadence_months: Months between renewals, must be >= 1
        window_start: Inclusive lower bound
        window_end: Inclusive upper bound
        fast_forward_cap: Max steps taken to reach window_start
        window_cap: Max dates yielded inside the window
    """

    anchor: date
    cadence_months: int
    window_start: date
    window_end: date
    fast_forward_cap: int = FAST_FORWARD_CAP
    window_cap: int = WINDOW_CAP

    def __post_init__(self):
        if self.cadence_months < 1:
            raise ValueError(f"cadence_months must be >= 1, got {self.cadence_months}")

    def _advance(self, cursor: date) -> Optional[date]:
        try:
            return add_months(cursor, self.cadence_months)
        except (OverflowError, ValueError):
            # past date.max
            return None

    def _fast_forward(self) -> Tuple[Optional[date], bool]:
        """Return (first cursor >= window_start or None, whether the cap was hit)."""
        cursor = self.anchor
        steps = 0
        while cursor is not None and cursor < self.window_start:
            if steps >= self.fast_forward_cap:
                return None, True
            cursor = self._advance(cursor)
            steps += 1
        return cursor, False

    def _walk(self) -> Iterator[Tuple[date, bool]]:
        cursor, _ = self._fast_forward()
        if cursor is None:
            return
        emitted = 0
        while cursor is not None and cursor <= self.window_end:
            if emitted >= self.window_cap:
                yield cursor, True
                return
            yield cursor, False
            emitted += 1
            cursor = self._advance(cursor)

    def __iter__(self) -> Iterator[date]:
        for cursor, capped in self._walk():
            if capped:
                return
            yield cursor

    @property
    def truncated(self) -> bool:
        """True when either iteration cap cut the sequence short."""
        _, capped = self._fast_forward()
        if capped:
            return True
        return any(capped for _, capped in self._walk())


def renewal_dates(
    anchor: date,
    cadence_months: int,
    window_start: date,
    window_end: date,
    fast_forward_cap: int = FAST_FORWARD_CAP,
    window_cap: int = WINDOW_CAP,
) -> RenewalHorizon:
    """Build the renewal horizon for an anchor and window."""
    return RenewalHorizon(
        anchor=anchor,
        cadence_months=cadence_months,
        window_start=window_start,
        window_end=window_end,
        fast_forward_cap=fast_forward_cap,
        window_cap=window_cap,
    )
