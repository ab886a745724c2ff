"""Route guard: where a given session may go, and what its sidebar shows."""

from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import BaseModel, ValidationError

from libs.auth.access import (
    AccessState,
    SidebarState,
    navigation_for,
    resolve_route,
    state_for,
)
from libs.auth.dependencies import decode_access_token, load_profile
from libs.auth.models import AuthUser
from libs.common.supabase import SupabaseGateway, get_user_client
from services.members_service.schemas import NavigationResponse
from services.members_service.services.navigation import navigation_response

router = APIRouter(prefix="/navigation", tags=["navigation"])

optional_security = HTTPBearer(auto_error=False)


class NavigationRequest(BaseModel):
    path: str
    is_mobile: bool = False
    sidebar_open: bool = False


class NavigationDecisionResponse(BaseModel):
    path: str
    decision: Literal["allow", "redirect"]
    target: str
    state: AccessState
    profile_missing: bool = False
    navigation: Optional[NavigationResponse] = None


def get_optional_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(optional_security)],
) -> Optional[AuthUser]:
    """A missing or invalid token means the caller is signed out."""
    if token is None:
        return None
    try:
        return decode_access_token(token.credentials)
    except (JWTError, ValidationError):
        return None


def get_optional_gateway(
    user: Annotated[Optional[AuthUser], Depends(get_optional_user)],
) -> Optional[SupabaseGateway]:
    if user is None:
        return None
    return SupabaseGateway(get_user_client(user.token or ""))


@router.post("/resolve", response_model=NavigationDecisionResponse)
async def resolve_navigation(
    payload: NavigationRequest,
    user: Annotated[Optional[AuthUser], Depends(get_optional_user)],
    gateway: Annotated[Optional[SupabaseGateway], Depends(get_optional_gateway)],
):
    profile = None
    if user is not None and gateway is not None:
        profile = await load_profile(gateway, user.user_id)
    state = state_for(user is not None, profile)
    decision = resolve_route(payload.path, state, profile.role if profile else None)

    navigation = None
    if state == AccessState.AUTHENTICATED_APPROVED:
        sidebar = SidebarState(is_mobile=payload.is_mobile, mobile_open=payload.sidebar_open)
        navigation = navigation_response(
            navigation_for(profile.role, sidebar, current_path=decision.target)
        )

    return NavigationDecisionResponse(
        path=decision.path,
        decision="allow" if decision.allowed else "redirect",
        target=decision.target,
        state=state,
        profile_missing=decision.profile_missing,
        navigation=navigation,
    )
