"""FastAPI application for the Volunteer Service."""

from fastapi import FastAPI

from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.volunteer_service.routers import (
    catalogue_router,
    hours_router,
    signatures_router,
)


def create_app() -> FastAPI:
    """Create the Volunteer Service app (hours, catalogue, signature review)."""
    app = FastAPI(
        title="Honor Society Volunteer Service",
        version="0.1.0",
        description="Service-hour logging, trimester roll-ups, eligibility and signature review.",
    )
    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "volunteer"}

    app.include_router(hours_router)
    app.include_router(catalogue_router)
    app.include_router(signatures_router)

    return app


app = create_app()
