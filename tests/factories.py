"""
Row factories for creating valid test data.

Every factory returns a plain dict shaped like a backend row.
Override any field via kwargs.

Usage:
    profile = ProfileFactory.create(role="leader")
    gateway.add("profiles", profile)
"""

import uuid
from datetime import date, datetime, timedelta, timezone

from jose import jwt

from libs.auth.models import AuthUser
from libs.common.config import get_settings

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex[:8]}@test.com"


def make_token(user_id: str, email: str = "member@test.com", expires_in: int = 3600) -> str:
    """A Supabase-shaped access token signed with the configured secret."""
    payload = {
        "sub": user_id,
        "email": email,
        "role": "authenticated",
        "aud": "authenticated",
        "exp": int((_now() + timedelta(seconds=expires_in)).timestamp()),
    }
    return jwt.encode(payload, get_settings().SUPABASE_JWT_SECRET, algorithm="HS256")


def auth_user_for(profile: dict) -> AuthUser:
    return AuthUser(
        user_id=profile["id"],
        email=profile.get("email"),
        token=make_token(profile["id"]),
    )


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------


class ProfileFactory:
    @staticmethod
    def create(**overrides) -> dict:
        defaults = {
            "id": _uuid(),
            "first_name": "Test",
            "last_name": "Member",
            "grade": 11,
            "role": "member",
            "approved": True,
            "email": _unique_email(),
            "created_at": _now().isoformat(),
        }
        defaults.update(overrides)
        return defaults


# ---------------------------------------------------------------------------
# Volunteer
# ---------------------------------------------------------------------------


class ServiceHourFactory:
    @staticmethod
    def create(**overrides) -> dict:
        defaults = {
            "id": _uuid(),
            "user_id": _uuid(),
            "hours": 2,
            "category": "in_school",
            "trimester": 1,
            "date": date(2025, 10, 1).isoformat(),
            "description": "Library tutoring",
            "supervisor_name": "Ms. Rivera",
            "signature": None,
            "status": "completed",
            "created_at": _now().isoformat(),
        }
        defaults.update(overrides)
        return defaults


# ---------------------------------------------------------------------------
# Events / Communications
# ---------------------------------------------------------------------------


class EventFactory:
    @staticmethod
    def create(**overrides) -> dict:
        defaults = {
            "id": _uuid(),
            "title": "Chapter meeting",
            "category": "mandatory",
            "description": None,
            "event_date": date(2025, 10, 15).isoformat(),
            "created_by": _uuid(),
        }
        defaults.update(overrides)
        return defaults


class PostFactory:
    @staticmethod
    def create(**overrides) -> dict:
        defaults = {
            "id": _uuid(),
            "user_id": _uuid(),
            "title": "Welcome back",
            "description": "First meeting is Thursday.",
            "created_at": _now().isoformat(),
            "replies": [],
        }
        defaults.update(overrides)
        return defaults


def add_profile(gateway, **overrides) -> dict:
    """Create a profile row and store it in ``gateway``."""
    profile = ProfileFactory.create(**overrides)
    gateway.add("profiles", profile)
    return profile
