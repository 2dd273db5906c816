"""
Unit tests for the calendar feed export.
"""
import pytest
from datetime import date, timedelta

from keydates.projections.collect import collect_events
from keydates.projections.ics import (
    build_feed,
    event_summary,
    parse_ics,
    render_calendar,
)
from keydates.recurrence.generator import EventKind, KeyDateEvent


@pytest.fixture
def feed(renewing_agreement):
    """Feed covering the term end, both renewals and the notice deadline."""
    return build_feed([renewing_agreement], date(2025, 1, 1), horizon_months=13)


class TestRenderCalendar:
    """Test suite for iCalendar rendering."""

    def test_envelope(self, feed):
        """Test header and footer lines."""
        lines = feed.split("\r\n")

        assert lines[:3] == ["BEGIN:VCALENDAR", "VERSION:2.0", "PRODID:-//KeyDates//Renewals//EN"]
        assert lines[-1] == "END:VCALENDAR"

    def test_crlf_only(self, feed):
        """Test that every line break is CRLF."""
        assert "\n" not in feed.replace("\r\n", "")

    def test_event_block(self, feed):
        """Test the exact lines of one all-day event."""
        lines = feed.split("\r\n")
        start = lines.index("UID:agr-1-term-2025-01-15") - 1

        assert lines[start:start + 7] == [
            "BEGIN:VEVENT",
            "UID:agr-1-term-2025-01-15",
            "SUMMARY:Term End - Acme (Hosting)",
            "DTSTART;VALUE=DATE:20250115",
            "DTEND;VALUE=DATE:20250116",
            "DESCRIPTION:End of current term",
            "END:VEVENT",
        ]

    def test_notice_description(self, feed):
        """Test that notice deadlines name the renewal they precede."""
        assert "DESCRIPTION:30-day notice before 2026-01-15" in feed.split("\r\n")

    def test_event_count(self, feed):
        """Test one VEVENT per generated event."""
        assert feed.count("BEGIN:VEVENT") == 4

    def test_newlines_in_labels_flattened(self):
        """Test that embedded newlines become spaces."""
        event = KeyDateEvent("agr-1", EventKind.RENEWAL, date(2025, 12, 31), vendor="Acme\nCorp", title="Hosting")

        text = render_calendar([event])

        assert "SUMMARY:Renewal - Acme Corp (Hosting)" in text.split("\r\n")
        assert "DTEND;VALUE=DATE:20260101" in text.split("\r\n")

    def test_summary_without_vendor(self):
        """Test falling back to the agreement id."""
        event = KeyDateEvent("agr-7", EventKind.TERM_END, date(2025, 1, 1))

        assert event_summary(event) == "Term End - agr-7"

    def test_empty_feed(self):
        """Test a calendar with no events."""
        assert render_calendar([], product_id="-//Test//EN") == (
            "BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//Test//EN\r\nEND:VCALENDAR"
        )


class TestFeedWindow:
    """Test suite for the feed horizon."""

    def test_default_horizon_is_twelve_months(self, renewing_agreement):
        """Test that the renewal after the twelve-month window is left out."""
        feed = build_feed([renewing_agreement], date(2025, 1, 1))

        uids = [e["uid"] for e in parse_ics(feed)]
        assert uids == ["agr-1-term-2025-01-15", "agr-1-renewal-2025-01-15"]


class TestRoundTrip:
    """Test suite for parsing the feed back."""

    def test_dates_survive_round_trip(self, renewing_agreement):
        """Test that each event parses back to its date with a one-day DTEND."""
        events = collect_events([renewing_agreement], date(2025, 1, 1), date(2026, 2, 1))

        parsed = parse_ics(render_calendar(events))

        assert len(parsed) == len(events)
        for event, block in zip(events, parsed):
            assert block["uid"] == event.id
            assert block["dtstart"] == event.occurs_on
            assert block["dtend"] == event.occurs_on + timedelta(days=1)

    def test_uids_stable_across_exports(self, renewing_agreement):
        """Test that exporting twice yields identical feeds."""
        first = build_feed([renewing_agreement], date(2025, 1, 1), horizon_months=13)
        second = build_feed([renewing_agreement], date(2025, 1, 1), horizon_months=13)

        assert first == second
