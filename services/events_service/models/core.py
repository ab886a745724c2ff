"""Row model for the ``events`` table."""

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from services.events_service.models.enums import EventCategory


class Event(BaseModel):
    """A dated calendar entry. Category is kept raw so unknown values still render."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    category: str = EventCategory.OTHER.value
    description: Optional[str] = None
    event_date: dt.date
    created_by: Optional[str] = None

    @field_validator("event_date", mode="before")
    @classmethod
    def strip_time(cls, v: Any) -> Any:
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    def __repr__(self):
        return f"<Event {self.title}>"
