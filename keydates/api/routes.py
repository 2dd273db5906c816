"""
API Routes for the Contract Key Dates service.
Every view is computed from the agreement snapshots in the request body.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional
from fastapi import APIRouter, HTTPException, Response

from keydates import __version__
from keydates.api.models import (
    AgendaResponse,
    AsOfRequest,
    DigestResponse,
    EventsRequest,
    EventsResponse,
    FeedRequest,
    HealthResponse,
    KeyDatesRequest,
    KeyDatesResponse,
    MonthGridResponse,
    MonthRequest,
    RemindersRequest,
    RemindersResponse,
)
from keydates.projections import (
    build_agenda,
    build_daily_digest,
    build_feed,
    build_key_dates,
    build_month_grid,
    build_reminder_digests,
    collect_events,
)
from keydates.recurrence.dates import parse_iso_date, to_iso_date
from keydates.utils.config import get_api_config, get_setting
from keydates.utils.kafka import create_reminder_notifier

logger = logging.getLogger(__name__)
router = APIRouter()


def get_app_version() -> str:
    return get_api_config().get('api', {}).get('version', __version__)


def resolve_as_of(as_of: Optional[str]) -> date:
    """Reference date for a request; the wall clock is read only here."""
    if not as_of:
        return date.today()
    return parse_iso_date(as_of)


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=get_app_version(),
        timestamp=datetime.now(timezone.utc).isoformat()
    )


@router.post("/events", response_model=EventsResponse, tags=["Events"])
async def list_events(request: EventsRequest):
    """Key-date events of all agreements inside an explicit window."""
    try:
        window_start = parse_iso_date(request.window_start)
        window_end = parse_iso_date(request.window_end)
        events = collect_events(request.to_agreements(), window_start, window_end)
        logger.info(
            f"Generated {len(events)} events for {len(request.agreements)} agreements "
            f"in {request.window_start}..{request.window_end}"
        )
        return EventsResponse(
            window_start=request.window_start,
            window_end=request.window_end,
            events=[event.to_dict() for event in events],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error generating events: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/agenda", response_model=AgendaResponse, tags=["Views"])
async def agenda(request: AsOfRequest):
    """Upcoming events grouped into today / 0-30d / 31-60d / 61+d buckets."""
    try:
        as_of = resolve_as_of(request.as_of)
        view = build_agenda(request.to_agreements(), as_of)
        logger.info(f"Agenda as of {to_iso_date(as_of)}: {len(view['items'])} items")
        return AgendaResponse(**view)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building agenda: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/calendar/month", response_model=MonthGridResponse, tags=["Views"])
async def month_grid(request: MonthRequest):
    """Events of one calendar month keyed by day-of-month."""
    try:
        view = build_month_grid(request.to_agreements(), request.year, request.month)
        logger.info(f"Month grid {request.year}-{request.month:02d}: {len(view['days'])} days with events")
        return MonthGridResponse(**view)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building month grid: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/calendar/ics", tags=["Views"])
async def calendar_feed(request: FeedRequest):
    """iCalendar export of the next horizon_months of key dates."""
    try:
        as_of = resolve_as_of(request.as_of)
        body = build_feed(request.to_agreements(), as_of, request.horizon_months)
        filename = get_setting("feed", "filename", "renewals.ics")
        logger.info(f"Calendar feed as of {to_iso_date(as_of)} for {len(request.agreements)} agreements")
        return Response(
            content=body,
            media_type="text/calendar; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building calendar feed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/reminders", response_model=RemindersResponse, tags=["Reminders"])
async def run_reminders(request: RemindersRequest):
    """
    Select reminders due on the run date and publish one digest per owner.
    With dry_run the digests are returned but not published.
    """
    try:
        as_of = resolve_as_of(request.as_of)
        digests = build_reminder_digests(request.to_agreements(), as_of, request.offsets)

        published = 0
        if not request.dry_run and digests:
            notifier = create_reminder_notifier()
            try:
                published = sum(1 for digest in digests if notifier.publish_digest(digest))
            finally:
                notifier.close()

        logger.info(
            f"Reminder run {to_iso_date(as_of)}: {len(digests)} digests, "
            f"{published} published (dry_run={request.dry_run})"
        )
        return RemindersResponse(
            as_of=to_iso_date(as_of),
            dry_run=request.dry_run,
            digests=digests,
            published=published,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error running reminders: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/digest", response_model=DigestResponse, tags=["Reminders"])
async def daily_digest(request: AsOfRequest):
    """Per-owner summary of every agreement with its next renewal."""
    try:
        as_of = resolve_as_of(request.as_of)
        digests = build_daily_digest(request.to_agreements(), as_of)
        logger.info(f"Daily digest {to_iso_date(as_of)}: {len(digests)} owners")
        return DigestResponse(as_of=to_iso_date(as_of), digests=digests)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building daily digest: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/key-dates", response_model=KeyDatesResponse, tags=["Events"])
async def key_dates(request: KeyDatesRequest):
    """Full replacement set of key-date rows for one agreement."""
    try:
        as_of = resolve_as_of(request.as_of)
        agreement = request.agreement.to_agreement()
        rows = build_key_dates(agreement, as_of, request.months_ahead)
        logger.info(f"Recomputed {len(rows)} key dates for agreement {agreement.id}")
        return KeyDatesResponse(agreement_id=agreement.id, as_of=to_iso_date(as_of), key_dates=rows)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building key dates: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
