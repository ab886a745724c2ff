"""Account rules: sign-up validation, password changes and admin self-protection."""

from typing import Iterable, Optional, Sequence

from fastapi import HTTPException, status

from libs.auth.models import Profile, Role
from libs.common.logging import get_logger
from libs.common.supabase import SupabaseGateway
from services.members_service.models import (
    ADMIN_CONFIRMATION,
    GRADE_RANGE,
    MIN_PASSWORD_LENGTH,
    UserFilter,
    UserRecord,
)
from services.members_service.schemas import UserListResponse, UserResponse

logger = get_logger(__name__)


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


# ── Sign-up / password ──────────────────────────────────────────────


def validate_new_password(password: str, confirm: str, mismatch_message: str) -> None:
    if password != confirm:
        raise _bad_request(mismatch_message)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise _bad_request(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def validate_grade(grade: Optional[int]) -> None:
    low, high = GRADE_RANGE
    if grade is not None and not low <= grade <= high:
        raise _bad_request(f"Grade must be between {low} and {high}")


def validate_signup(password: str, confirm: str, grade: Optional[int]) -> None:
    validate_new_password(password, confirm, "Passwords don't match!")
    validate_grade(grade)


# ── User directory ──────────────────────────────────────────────────


def filter_users(
    users: Iterable[UserRecord], user_filter: UserFilter, search: str = ""
) -> list[UserRecord]:
    needle = search.strip().lower()
    kept = []
    for user in users:
        if user_filter == UserFilter.PENDING and user.approved:
            continue
        if user_filter == UserFilter.APPROVED and not user.approved:
            continue
        if needle and needle not in user.search_text:
            continue
        kept.append(user)
    return kept


def pending_count(users: Iterable[UserRecord]) -> int:
    return sum(1 for user in users if not user.approved)


# ── Self-protection ─────────────────────────────────────────────────


def ensure_selection(user_ids: Sequence[str]) -> None:
    if not user_ids:
        raise _bad_request("No users selected")


def ensure_can_unapprove(
    actor: Profile, user_ids: Sequence[str], users: Iterable[UserRecord]
) -> None:
    ensure_selection(user_ids)
    if actor.id in user_ids:
        raise _bad_request("You cannot unapprove yourself")
    selected = set(user_ids)
    if any(u.id in selected and u.role == Role.ADMIN for u in users):
        raise _bad_request("You cannot unapprove admins. Admins must be removed instead.")


def ensure_can_remove(actor: Profile, user_ids: Sequence[str]) -> None:
    ensure_selection(user_ids)
    if actor.id in user_ids:
        raise _bad_request("You cannot remove yourself")


def ensure_can_change_role(
    actor: Profile, user_id: str, new_role: Role, confirmation: Optional[str]
) -> None:
    if user_id == actor.id and new_role != Role.ADMIN:
        raise _bad_request("You cannot change your own admin role")
    if new_role == Role.ADMIN and user_id != actor.id:
        if confirmation != ADMIN_CONFIRMATION:
            raise _bad_request('You must type "admin" to confirm')


# ── Deletion ────────────────────────────────────────────────────────


async def delete_members(
    gateway: SupabaseGateway, user_ids: Sequence[str], *, drop_auth_users: bool = True
) -> None:
    """Remove members together with their service hours, then their auth users."""
    ids = list(user_ids)
    await gateway.delete("service_hours", in_filters={"user_id": ids})
    await gateway.delete("profiles", in_filters={"id": ids})
    if drop_auth_users:
        await gateway.rpc("delete_users", {"user_ids": ids})
    logger.info(
        "Members deleted",
        extra={"extra_fields": {"count": len(ids), "auth_users": drop_auth_users}},
    )


# ── Directory loading ───────────────────────────────────────────────


async def load_users(gateway: SupabaseGateway) -> list[UserRecord]:
    rows = await gateway.rpc("get_all_users_with_emails") or []
    return [UserRecord(**row) for row in rows]


async def load_user_list(
    gateway: SupabaseGateway, user_filter: UserFilter = UserFilter.ALL, search: str = ""
) -> UserListResponse:
    users = await load_users(gateway)
    return UserListResponse(
        users=[
            UserResponse(**u.model_dump())
            for u in filter_users(users, user_filter, search)
        ],
        pending_count=pending_count(users),
    )
