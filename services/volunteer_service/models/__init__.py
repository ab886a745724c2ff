"""Volunteer Service models package."""

from services.volunteer_service.models.core import ServiceHourEntry
from services.volunteer_service.models.enums import (
    GRADES,
    TRIMESTERS,
    EntryStatus,
    HourCategory,
)

__all__ = [
    "GRADES",
    "TRIMESTERS",
    "EntryStatus",
    "HourCategory",
    "ServiceHourEntry",
]
