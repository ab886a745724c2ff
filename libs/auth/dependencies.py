from typing import Annotated, Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import PROFILE_COLUMNS, AuthUser, Profile, Role
from libs.common.config import get_settings
from libs.common.supabase import SupabaseGateway, get_user_client

security = HTTPBearer()


def decode_access_token(token: str) -> AuthUser:
    """Validate a Supabase access token (HS256) and return its user."""
    settings = get_settings()
    payload = jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=["HS256"],
        audience="authenticated",
    )
    user = AuthUser(**payload)
    user.token = token
    return user


async def get_current_user(
    request: Request,
    token: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> AuthUser:
    """
    Validate the Supabase JWT and return the authenticated user.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        user = decode_access_token(token.credentials)
    except (JWTError, ValidationError):
        raise credentials_exception

    request.state.user = user
    return user


def get_gateway(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> SupabaseGateway:
    """Backend gateway acting as the calling user (row security applies)."""
    return SupabaseGateway(get_user_client(current_user.token or ""))


async def load_profile(gateway: SupabaseGateway, user_id: str) -> Optional[Profile]:
    row = await gateway.select_one(
        "profiles", PROFILE_COLUMNS, filters={"id": user_id}
    )
    return Profile(**row) if row else None


async def get_current_profile(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
) -> Profile:
    profile = await load_profile(gateway, current_user.user_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
        )
    return profile


async def require_approved(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> Profile:
    """Unapproved accounts reach nothing but the pending screen and sign-out."""
    if not profile.approved:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account is awaiting approval from an administrator.",
        )
    return profile


def require_roles(*roles: Role) -> Callable:
    """Dependency factory: approved profile whose role is one of ``roles``."""
    allowed = frozenset(roles)

    async def _require(
        profile: Annotated[Profile, Depends(require_approved)],
    ) -> Profile:
        if profile.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to access this resource.",
            )
        return profile

    return _require


require_admin = require_roles(Role.ADMIN)
require_leader = require_roles(Role.LEADER, Role.ADMIN)
require_member_hours = require_roles(Role.MEMBER, Role.LEADER)
