"""Events Service schemas package."""

from services.events_service.schemas.main import (  # noqa: F401
    CalendarResponse,
    EventCreate,
    EventResponse,
    EventUpdate,
)
