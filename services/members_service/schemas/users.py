"""Settings and user-administration schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from libs.auth.models import Role


class ProfileUpdate(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    # Blank means "no grade"; ignored for admins.
    grade: Optional[int] = None


class PasswordChange(BaseModel):
    new_password: str
    confirm_password: str


class AccountDeletion(BaseModel):
    confirmation: str


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    grade: Optional[int] = None
    role: Role
    approved: bool
    created_at: Optional[str] = None


class UserListResponse(BaseModel):
    users: list[UserResponse]
    pending_count: int


class UserSelection(BaseModel):
    user_ids: list[str]


class RoleChange(BaseModel):
    role: Role
    confirmation: Optional[str] = None


class BulkActionResponse(BaseModel):
    affected: int
    message: str
