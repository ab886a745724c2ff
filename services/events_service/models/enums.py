"""Enum definitions for events service models."""

import enum


class EventCategory(str, enum.Enum):
    MANDATORY = "mandatory"
    IN_SCHOOL = "in-school"
    OUT_OF_SCHOOL = "out-of-school"
    RED_HOOK = "red-hook"
    OTHER = "other"


CATEGORY_LABELS = {
    EventCategory.MANDATORY: "Mandatory",
    EventCategory.IN_SCHOOL: "In-School",
    EventCategory.OUT_OF_SCHOOL: "Out-of-School",
    EventCategory.RED_HOOK: "Red Hook",
    EventCategory.OTHER: "Other",
}

CATEGORY_COLORS = {
    EventCategory.MANDATORY: "#c93030",
    EventCategory.IN_SCHOOL: "#d4a574",
    EventCategory.OUT_OF_SCHOOL: "#7BB274",
    EventCategory.RED_HOOK: "#4a5568",
    EventCategory.OTHER: "grey",
}

UNKNOWN_CATEGORY_COLOR = "#718096"


def category_label(category: str) -> str:
    try:
        return CATEGORY_LABELS[EventCategory(category)]
    except ValueError:
        return category


def category_color(category: str) -> str:
    try:
        return CATEGORY_COLORS[EventCategory(category)]
    except ValueError:
        return UNKNOWN_CATEGORY_COLOR
