"""Enum definitions for members service models."""

import enum


class UserFilter(str, enum.Enum):
    """Approval filter on the user-management list."""

    ALL = "all"
    PENDING = "pending"
    APPROVED = "approved"


GRADE_RANGE = (10, 12)
MIN_PASSWORD_LENGTH = 6

ADMIN_CONFIRMATION = "admin"
DELETE_CONFIRMATION = "DELETE"
