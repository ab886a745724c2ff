"""Rate limiting configuration for the portal API.

Uses slowapi. Storage defaults to in-process memory; point
RATE_LIMIT_STORAGE_URI at Redis when running more than one worker.
"""

from functools import lru_cache

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)


def _get_client_ip(request: Request) -> str:
    """
    Get client IP from request, handling proxies.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def _get_user_or_ip(request: Request) -> str:
    """
    Rate limit by user ID if authenticated, otherwise by IP.
    """
    user = getattr(request.state, "user", None)
    if user is not None:
        return f"user:{user.user_id}"
    return f"ip:{_get_client_ip(request)}"


@lru_cache
def get_limiter() -> Limiter:
    settings = get_settings()
    return Limiter(
        key_func=_get_user_or_ip,
        default_limits=["120/minute"],
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    )


limiter = get_limiter()


def auth_rate_limit() -> str:
    return get_settings().AUTH_RATE_LIMIT


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    logger.warning(
        "Rate limit exceeded",
        extra={"extra_fields": {"client": _get_user_or_ip(request), "limit": str(exc.detail)}},
    )
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
        headers={"Retry-After": "60"},
    )
