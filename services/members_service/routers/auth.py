"""Session operations: sign-up, sign-in, refresh, sign-out and session state."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from libs.auth.access import SidebarState
from libs.auth.dependencies import get_current_user, get_gateway, load_profile
from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.common.rate_limit import auth_rate_limit, limiter
from libs.common.supabase import AuthGateway, SessionTokens, SupabaseGateway, get_auth_gateway
from services.members_service.schemas import (
    RefreshRequest,
    SessionResponse,
    SessionStateResponse,
    SignInRequest,
    SignUpRequest,
    SignUpResponse,
)
from services.members_service.services.accounts import validate_signup
from services.members_service.services.navigation import session_state

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _session_response(tokens: SessionTokens) -> SessionResponse:
    return SessionResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_at=tokens.expires_at,
        user_id=tokens.user_id,
    )


@router.post("/signup", response_model=SignUpResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(auth_rate_limit)
async def sign_up(
    request: Request,
    payload: SignUpRequest,
    auth: Annotated[AuthGateway, Depends(get_auth_gateway)],
):
    """
    Register a new account.

    The backend creates the profile (role member, unapproved) from the metadata
    and e-mails a confirmation link that lands on the login page.
    """
    validate_signup(payload.password, payload.confirm_password, payload.grade)

    settings = get_settings()
    await auth.sign_up(
        payload.email,
        payload.password,
        metadata={
            "first_name": payload.first_name.strip(),
            "last_name": payload.last_name.strip(),
            "grade": payload.grade,
        },
        redirect_to=f"{settings.FRONTEND_URL}/login",
    )
    logger.info("Sign-up requested", extra={"extra_fields": {"email": payload.email}})
    return SignUpResponse(email=payload.email, confirmation_sent=True)


@router.post("/signin", response_model=SessionResponse)
@limiter.limit(auth_rate_limit)
async def sign_in(
    request: Request,
    payload: SignInRequest,
    auth: Annotated[AuthGateway, Depends(get_auth_gateway)],
):
    tokens = await auth.sign_in(payload.email, payload.password)
    return _session_response(tokens)


@router.post("/refresh", response_model=SessionResponse)
async def refresh(
    payload: RefreshRequest,
    auth: Annotated[AuthGateway, Depends(get_auth_gateway)],
):
    """Restore a session from a stored refresh token."""
    tokens = await auth.refresh_session(payload.refresh_token)
    return _session_response(tokens)


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    auth: Annotated[AuthGateway, Depends(get_auth_gateway)],
):
    await auth.sign_out(current_user.token or "")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/session", response_model=SessionStateResponse)
async def get_session(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
    is_mobile: bool = False,
    mobile_open: bool = False,
):
    profile = await load_profile(gateway, current_user.user_id)
    return session_state(profile, SidebarState(is_mobile=is_mobile, mobile_open=mobile_open))
