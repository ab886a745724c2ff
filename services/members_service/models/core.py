"""Rows returned by the user-directory RPCs."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from libs.auth.models import Role


class UserRecord(BaseModel):
    """A profile joined with its auth e-mail (``get_all_users_with_emails``)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str = ""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    grade: Optional[int] = None
    role: Role = Role.MEMBER
    approved: bool = False
    created_at: Optional[str] = None

    @property
    def search_text(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''} {self.email}".lower()
