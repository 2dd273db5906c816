"""Views built on top of the event generator."""

from keydates.projections.collect import collect_events
from keydates.projections.agenda import build_agenda
from keydates.projections.month_grid import build_month_grid
from keydates.projections.ics import build_feed, parse_ics, render_calendar
from keydates.projections.reminders import build_reminder_digests, select_reminders
from keydates.projections.digest import build_daily_digest
from keydates.projections.key_dates import build_key_dates

__all__ = [
    "collect_events",
    "build_agenda",
    "build_month_grid",
    "build_feed",
    "parse_ics",
    "render_calendar",
    "build_reminder_digests",
    "select_reminders",
    "build_daily_digest",
    "build_key_dates",
]
