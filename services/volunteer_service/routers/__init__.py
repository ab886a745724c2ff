"""Volunteer service routers."""

from services.volunteer_service.routers.admin import router as signatures_router
from services.volunteer_service.routers.catalogue import router as catalogue_router
from services.volunteer_service.routers.member import router as hours_router

__all__ = [
    "catalogue_router",
    "hours_router",
    "signatures_router",
]
