"""FastAPI application for the Events Service."""
from fastapi import FastAPI

from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.events_service.routers import events_router


def create_app() -> FastAPI:
    """Create and configure the Events Service FastAPI app."""
    app = FastAPI(
        title="Honor Society Events Service",
        version="0.1.0",
        description="Chapter calendar: mandatory meetings and service opportunities.",
    )
    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "events"}

    app.include_router(events_router)

    return app


app = create_app()
