"""Members Service models package."""

from services.members_service.models.core import UserRecord
from services.members_service.models.enums import (
    ADMIN_CONFIRMATION,
    DELETE_CONFIRMATION,
    GRADE_RANGE,
    MIN_PASSWORD_LENGTH,
    UserFilter,
)

__all__ = [
    "ADMIN_CONFIRMATION",
    "DELETE_CONFIRMATION",
    "GRADE_RANGE",
    "MIN_PASSWORD_LENGTH",
    "UserFilter",
    "UserRecord",
]
