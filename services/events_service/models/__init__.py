"""Events Service models package."""

from services.events_service.models.core import Event
from services.events_service.models.enums import (
    CATEGORY_COLORS,
    CATEGORY_LABELS,
    EventCategory,
    category_color,
    category_label,
)

__all__ = [
    "CATEGORY_COLORS",
    "CATEGORY_LABELS",
    "Event",
    "EventCategory",
    "category_color",
    "category_label",
]
