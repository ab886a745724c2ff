"""Calendar events: everyone approved reads, leaders and admins manage."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from libs.auth.dependencies import get_gateway, require_approved, require_leader
from libs.auth.models import Profile
from libs.common.datetime_utils import local_today
from libs.common.logging import get_logger
from libs.common.supabase import SupabaseGateway
from services.events_service.schemas import CalendarResponse, EventCreate, EventUpdate
from services.events_service.services.calendar_view import TABLE, load_calendar

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["events"])


def _row(payload: EventCreate | EventUpdate) -> dict:
    return {
        "title": payload.title,
        "category": payload.category.value,
        "description": payload.description,
        "event_date": payload.event_date.isoformat(),
    }


@router.get("", response_model=CalendarResponse)
async def get_calendar(
    profile: Annotated[Profile, Depends(require_approved)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
    year: Optional[int] = Query(None, ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
):
    today = local_today()
    return await load_calendar(
        gateway,
        year or today.year,
        month or today.month,
        can_manage=profile.can_manage_content,
    )


@router.post("", response_model=CalendarResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    profile: Annotated[Profile, Depends(require_leader)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    row = await gateway.insert(TABLE, {**_row(payload), "created_by": profile.id})
    logger.info("Event created", extra={"extra_fields": {"event_id": row.get("id")}})
    date = payload.event_date
    return await load_calendar(gateway, date.year, date.month, can_manage=True)


@router.patch("/{event_id}", response_model=CalendarResponse)
async def update_event(
    event_id: str,
    payload: EventUpdate,
    _: Annotated[Profile, Depends(require_leader)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    updated = await gateway.update(TABLE, _row(payload), filters={"id": event_id})
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    date = payload.event_date
    return await load_calendar(gateway, date.year, date.month, can_manage=True)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    _: Annotated[Profile, Depends(require_leader)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    deleted = await gateway.delete(TABLE, filters={"id": event_id})
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
