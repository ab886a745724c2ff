"""Sign-up, sign-in and session schemas."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from libs.auth.access import AccessState
from libs.auth.models import Profile


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    grade: Optional[int] = None


class SignUpResponse(BaseModel):
    email: EmailStr
    confirmation_sent: bool = True


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class SessionResponse(BaseModel):
    access_token: str
    refresh_token: str
    expires_at: Optional[int] = None
    user_id: str


class NavLinkResponse(BaseModel):
    path: str
    label: str
    active: bool = False


class SidebarResponse(BaseModel):
    is_mobile: bool = False
    mobile_open: bool = False


class NavigationResponse(BaseModel):
    links: list[NavLinkResponse]
    sidebar: SidebarResponse


class SessionStateResponse(BaseModel):
    """Where the access machine stands for the bearer of the token."""

    state: AccessState
    profile: Optional[Profile] = None
    navigation: Optional[NavigationResponse] = None
