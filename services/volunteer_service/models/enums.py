"""Enum definitions for volunteer service models."""

import enum


class HourCategory(str, enum.Enum):
    IN_SCHOOL = "in_school"
    # Stored as "out_school" in the service_hours table.
    OUT_OF_SCHOOL = "out_school"
    RED_HOOK = "red_hook"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    HourCategory.IN_SCHOOL: "In-School",
    HourCategory.OUT_OF_SCHOOL: "Out-of-School",
    HourCategory.RED_HOOK: "Red Hook",
}


class EntryStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


TRIMESTERS = (1, 2, 3)
GRADES = (10, 11, 12)
