"""Pydantic schemas for Events Service."""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from services.events_service.models import EventCategory


class EventBase(BaseModel):
    """Base event schema."""

    title: str = Field(..., min_length=1)
    category: EventCategory = EventCategory.OTHER
    description: Optional[str] = None
    event_date: dt.date

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()


class EventCreate(EventBase):
    """Schema for creating an event."""

    pass


class EventUpdate(EventBase):
    """Full replacement of an event's editable fields."""

    pass


class EventResponse(BaseModel):
    id: str
    title: str
    category: str
    category_label: str
    category_color: str
    description: Optional[str] = None
    event_date: dt.date
    created_by: Optional[str] = None


class CalendarResponse(BaseModel):
    year: int
    month: int
    # Leading None pads put day 1 under its weekday, Sunday first.
    days: list[Optional[int]]
    events_by_date: dict[str, list[EventResponse]]
    month_events: list[EventResponse]
    can_manage: bool
