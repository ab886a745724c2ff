"""FastAPI application for the Communications Service."""

from fastapi import FastAPI

from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.communications_service.routers import posts_router


def create_app() -> FastAPI:
    """Create and configure the Communications Service FastAPI app."""
    app = FastAPI(
        title="Honor Society Communications Service",
        version="0.1.0",
        description="Chapter announcements with member replies.",
    )
    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "communications"}

    app.include_router(posts_router)

    return app


app = create_app()
