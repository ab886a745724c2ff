"""FastAPI application entrypoint for the chapter portal gateway.

The gateway mounts every service router under ``/api/v1`` in one process;
each service also ships its own ``create_app`` for running it alone.
"""

from __future__ import annotations

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

load_dotenv()

from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.communications_service.routers import posts_router
from services.events_service.routers import events_router
from services.gateway_service.app.routers.dashboard import router as dashboard_router
from services.gateway_service.app.routers.live import router as live_router
from services.gateway_service.app.routers.navigation import router as navigation_router
from services.members_service.routers import admin_router, auth_router, members_router
from services.volunteer_service.routers import (
    catalogue_router,
    hours_router,
    signatures_router,
)

API_PREFIX = "/api/v1"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()
    app = FastAPI(
        title="Honor Society Chapter Portal",
        version="0.1.0",
        description="Service hours, eligibility, calendar, posts and membership for the chapter.",
    )

    # Add rate limiter state to app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    for router in (
        auth_router,
        members_router,
        admin_router,
        hours_router,
        catalogue_router,
        signatures_router,
        events_router,
        posts_router,
        dashboard_router,
        navigation_router,
        live_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()
