"""
Unit tests for request models and agreement ingestion.
"""
import pytest
from datetime import date
from pydantic import ValidationError

from keydates.api.models import AgreementPayload, EventsRequest, FeedRequest, MonthRequest


class TestAgreementPayload:
    """Test suite for AgreementPayload validation and conversion."""

    def test_to_agreement(self):
        """Test conversion to the engine snapshot."""
        payload = AgreementPayload(
            id="agr-1", owner_id="u1", vendor="Acme", title="Hosting",
            effective_on="2024-01-16", end_on="2025-01-15",
            auto_renews=True, notice_days=30, renewal_frequency_months=12,
        )

        agreement = payload.to_agreement()

        assert agreement.id == "agr-1"
        assert agreement.owner_id == "u1"
        assert agreement.effective_on == date(2024, 1, 16)
        assert agreement.end_on == date(2025, 1, 15)
        assert agreement.auto_renews is True
        assert agreement.notice_days == 30
        assert agreement.renewal_frequency_months == 12

    def test_end_derived_from_term(self):
        """Test end_on = effective_on + term_months - 1 day."""
        payload = AgreementPayload(id="agr-1", effective_on="2025-01-01", term_months=12)

        assert payload.end_on == "2025-12-31"

    @pytest.mark.parametrize("effective_on,term_months,expected", [
        ("2024-01-31", 1, "2024-02-28"),
        ("2025-01-31", 1, "2025-02-27"),
        ("2025-08-31", 6, "2026-02-27"),
    ])
    def test_end_derived_clamps_month_end(self, effective_on, term_months, expected):
        """Test that late-month start dates clamp before the day is subtracted."""
        payload = AgreementPayload(id="agr-1", effective_on=effective_on, term_months=term_months)

        assert payload.end_on == expected

    def test_explicit_end_kept(self):
        """Test that an explicit end date wins over the term length."""
        payload = AgreementPayload(id="agr-1", effective_on="2025-01-01", term_months=12, end_on="2025-06-30")

        assert payload.end_on == "2025-06-30"

    def test_no_end_without_term(self):
        """Test that nothing is derived without a term length."""
        payload = AgreementPayload(id="agr-1", effective_on="2025-01-01")

        assert payload.end_on is None
        assert payload.to_agreement().end_on is None

    def test_empty_string_dates_are_absent(self):
        """Test that blank dates are treated as missing."""
        payload = AgreementPayload(id="agr-1", end_on="")

        assert payload.end_on is None

    @pytest.mark.parametrize("bad", ["2025-02-30", "15/01/2025", "2025-1-1", "２０２５-０１-１５"])
    def test_malformed_dates_rejected(self, bad):
        """Test that malformed dates are rejected at the boundary."""
        with pytest.raises(ValidationError):
            AgreementPayload(id="agr-1", end_on=bad)

    def test_negative_notice_rejected(self):
        """Test that notice_days must be non-negative."""
        with pytest.raises(ValidationError):
            AgreementPayload(id="agr-1", notice_days=-1)

    def test_zero_cadence_accepted(self):
        """Test that a zero cadence passes through for the engine to normalize."""
        payload = AgreementPayload(id="agr-1", renewal_frequency_months=0)

        assert payload.to_agreement().renewal_frequency_months == 0


class TestRequests:
    """Test suite for request envelopes."""

    def test_events_request_window(self):
        """Test that window bounds must be valid dates."""
        with pytest.raises(ValidationError):
            EventsRequest(window_start="2025-01-01", window_end="2025-13-01")

    def test_month_range(self):
        """Test month bounds."""
        with pytest.raises(ValidationError):
            MonthRequest(year=2025, month=13)

    def test_feed_as_of(self):
        """Test as_of validation on feed requests."""
        assert FeedRequest(as_of="2025-01-01").as_of == "2025-01-01"
        with pytest.raises(ValidationError):
            FeedRequest(as_of="tomorrow")
