"""Communications service routers."""

from services.communications_service.routers.posts import router as posts_router

__all__ = ["posts_router"]
