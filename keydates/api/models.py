"""
Pydantic Models for the Contract Key Dates API.
Defines request and response schemas.
"""

from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from keydates.recurrence.dates import add_days, add_months_clamped, parse_iso_date, to_iso_date
from keydates.recurrence.generator import Agreement


def _validate_iso(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    return to_iso_date(parse_iso_date(value))


class AgreementPayload(BaseModel):
    """Agreement snapshot supplied by the caller."""
    id: str = Field(..., min_length=1, description="Stable agreement identifier")
    owner_id: Optional[str] = Field(None, description="Owner who receives reminders")
    vendor: str = Field("", description="Vendor display name")
    title: str = Field("", description="Agreement title")
    effective_on: Optional[str] = Field(None, description="Contract start, yyyy-mm-dd")
    end_on: Optional[str] = Field(None, description="Current term end, yyyy-mm-dd")
    term_months: int = Field(0, ge=0, description="Term length used to derive end_on")
    auto_renews: bool = Field(False, description="Whether the agreement auto-renews")
    notice_days: int = Field(0, ge=0, description="Notice lead time before a renewal")
    renewal_frequency_months: Optional[int] = Field(None, description="Renewal cadence; <= 0 or absent means 12")

    @field_validator("effective_on", "end_on")
    @classmethod
    def check_dates(cls, value: Optional[str]) -> Optional[str]:
        return _validate_iso(value)

    @model_validator(mode="after")
    def derive_end_on(self) -> "AgreementPayload":
        """Derive end_on = effective_on + term_months - 1 day when absent."""
        if self.end_on is None and self.effective_on and self.term_months > 0:
            start = parse_iso_date(self.effective_on)
            self.end_on = to_iso_date(add_days(add_months_clamped(start, self.term_months), -1))
        return self

    def to_agreement(self) -> Agreement:
        return Agreement(
            id=self.id,
            owner_id=self.owner_id,
            vendor=self.vendor,
            title=self.title,
            effective_on=parse_iso_date(self.effective_on) if self.effective_on else None,
            end_on=parse_iso_date(self.end_on) if self.end_on else None,
            term_months=self.term_months,
            auto_renews=self.auto_renews,
            notice_days=self.notice_days,
            renewal_frequency_months=self.renewal_frequency_months,
        )


class AgreementsRequest(BaseModel):
    """Base request carrying agreement snapshots."""
    agreements: List[AgreementPayload] = Field(default=[], description="Agreement snapshots")

    def to_agreements(self) -> List[Agreement]:
        return [payload.to_agreement() for payload in self.agreements]


class AsOfRequest(AgreementsRequest):
    """Request evaluated relative to a reference date."""
    as_of: Optional[str] = Field(None, description="Reference date, yyyy-mm-dd (defaults to today)")

    @field_validator("as_of")
    @classmethod
    def check_as_of(cls, value: Optional[str]) -> Optional[str]:
        return _validate_iso(value)


class EventsRequest(AgreementsRequest):
    """Request for raw events inside a window."""
    window_start: str = Field(..., description="Inclusive window start, yyyy-mm-dd")
    window_end: str = Field(..., description="Inclusive window end, yyyy-mm-dd")

    @field_validator("window_start", "window_end")
    @classmethod
    def check_window(cls, value: str) -> str:
        return to_iso_date(parse_iso_date(value))


class MonthRequest(AgreementsRequest):
    """Request for a month grid."""
    year: int = Field(..., ge=1, le=9999, description="Calendar year")
    month: int = Field(..., ge=1, le=12, description="Calendar month (1-12)")


class FeedRequest(AsOfRequest):
    """Request for a calendar feed."""
    horizon_months: Optional[int] = Field(None, ge=1, le=120, description="Feed length in months")


class RemindersRequest(AsOfRequest):
    """Request for a reminder run."""
    dry_run: bool = Field(False, description="Select reminders without publishing them")
    offsets: Optional[List[int]] = Field(
        None, description="Days-before offsets for this run (defaults to reminders.offsets)"
    )


class KeyDatesRequest(BaseModel):
    """Request for key-date rows of one agreement."""
    agreement: AgreementPayload
    as_of: Optional[str] = Field(None, description="Reference date, yyyy-mm-dd (defaults to today)")
    months_ahead: Optional[int] = Field(None, ge=1, le=240, description="Window length in months")

    @field_validator("as_of")
    @classmethod
    def check_as_of(cls, value: Optional[str]) -> Optional[str]:
        return _validate_iso(value)


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field("healthy", description="Service status")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="Current timestamp")


class EventResponse(BaseModel):
    """Serialized key-date event."""
    id: str
    agreement_id: str
    kind: str
    occurs_on: str
    vendor: str = ""
    title: str = ""
    renewal_on: Optional[str] = None


class EventsResponse(BaseModel):
    """Response model for raw events."""
    window_start: str
    window_end: str
    events: List[EventResponse] = Field(default=[])


class AgendaResponse(BaseModel):
    """Response model for the agenda view."""
    as_of: str
    window_end: str
    items: List[Dict[str, Any]] = Field(default=[])
    buckets: Dict[str, List[Dict[str, Any]]] = Field(default={})
    vendors: List[Dict[str, Any]] = Field(default=[])


class MonthGridResponse(BaseModel):
    """Response model for a month grid."""
    year: int
    month: int
    first_weekday: int
    days_in_month: int
    days: Dict[int, List[EventResponse]] = Field(default={})


class RemindersResponse(BaseModel):
    """Response model for a reminder run."""
    as_of: str
    dry_run: bool
    digests: List[Dict[str, Any]] = Field(default=[])
    published: int = Field(0, description="Digests handed to Kafka")


class DigestResponse(BaseModel):
    """Response model for the daily digest."""
    as_of: str
    digests: List[Dict[str, Any]] = Field(default=[])


class KeyDatesResponse(BaseModel):
    """Response model for key-date rows."""
    agreement_id: str
    as_of: str
    key_dates: List[Dict[str, str]] = Field(default=[])
