import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Role(str, enum.Enum):
    MEMBER = "member"
    LEADER = "leader"
    ADMIN = "admin"


class AuthUser(BaseModel):
    """
    Represents an authenticated user from a Supabase access token.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "authenticated"
    token: Optional[str] = Field(default=None, exclude=True)


class Profile(BaseModel):
    """A row of the ``profiles`` table; id equals the auth user id."""

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    grade: Optional[int] = None
    role: Role = Role.MEMBER
    approved: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def can_manage_content(self) -> bool:
        """Leaders and admins manage events, posts and see the catalogue."""
        return self.role in (Role.LEADER, Role.ADMIN)


PROFILE_COLUMNS = "id, first_name, last_name, grade, role, approved"
