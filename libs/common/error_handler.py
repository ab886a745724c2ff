"""Global exception handlers for consistent error responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from libs.common.logging import get_logger, get_request_id
from libs.common.supabase import BackendError

logger = get_logger(__name__)

GENERIC_BACKEND_FAILURE = "The backend request failed. Please try again."


async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    """Authorization rejections and auth API refusals are shown verbatim.

    Everything else gets a generic message.
    """
    if exc.is_authorization:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": exc.message},
        )
    if exc.is_auth_client_error:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": exc.message},
        )

    logger.error(
        "Backend failure surfaced to client",
        extra={"extra_fields": {"operation": exc.operation, "error": exc.message}},
    )
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": GENERIC_BACKEND_FAILURE, "request_id": get_request_id()},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "request_id": get_request_id()},
    )


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BackendError, backend_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
