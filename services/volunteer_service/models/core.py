"""Row model for the ``service_hours`` table."""

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from services.volunteer_service.models.enums import EntryStatus


class ServiceHourEntry(BaseModel):
    """One logged block of service, owned by exactly one member."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    hours: Optional[float] = None
    # Kept as the raw stored value so unknown categories stay visible.
    category: Optional[str] = None
    trimester: Optional[int] = None
    date: Optional[dt.date] = None
    description: Optional[str] = None
    supervisor_name: Optional[str] = None
    signature: Optional[str] = None
    status: EntryStatus = EntryStatus.IN_PROGRESS
    created_at: Optional[dt.datetime] = None

    @field_validator("hours", mode="before")
    @classmethod
    def coerce_hours(cls, v: Any) -> Optional[float]:
        if v is None or v == "":
            return None
        try:
            return float(v)
        except (TypeError, ValueError):
            return None

    @field_validator("trimester", mode="before")
    @classmethod
    def coerce_trimester(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            return None

    @field_validator("date", mode="before")
    @classmethod
    def strip_time(cls, v: Any) -> Any:
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @property
    def is_completed(self) -> bool:
        return self.status == EntryStatus.COMPLETED
