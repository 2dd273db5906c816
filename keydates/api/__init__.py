"""API module for the Contract Key Dates service."""

from keydates.api.routes import router
from keydates.api.models import (
    AgreementPayload,
    HealthResponse,
    EventsResponse,
    AgendaResponse,
)

__all__ = [
    "router",
    "AgreementPayload",
    "HealthResponse",
    "EventsResponse",
    "AgendaResponse",
]
