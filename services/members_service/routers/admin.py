"""Admin user management: approval, roles and removal."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from libs.auth.dependencies import get_gateway, require_admin
from libs.auth.models import Profile
from libs.common.logging import get_logger
from libs.common.supabase import SupabaseGateway
from services.members_service.models import UserFilter
from services.members_service.schemas import (
    BulkActionResponse,
    RoleChange,
    UserListResponse,
    UserResponse,
    UserSelection,
)
from services.members_service.services.accounts import (
    delete_members,
    ensure_can_change_role,
    ensure_can_remove,
    ensure_can_unapprove,
    ensure_selection,
    load_user_list,
    load_users,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/admin/users", tags=["admin-users"])


# ── Helpers ─────────────────────────────────────────────────────────


def _plural(count: int) -> str:
    return f"{count} user{'s' if count != 1 else ''}"


# ── Listing ─────────────────────────────────────────────────────────


@router.get("", response_model=UserListResponse)
async def list_users(
    _: Annotated[Profile, Depends(require_admin)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
    filter: UserFilter = UserFilter.ALL,
    search: str = "",
):
    return await load_user_list(gateway, filter, search)


# ── Approval ────────────────────────────────────────────────────────


@router.post("/approve", response_model=BulkActionResponse)
async def approve_users(
    payload: UserSelection,
    admin: Annotated[Profile, Depends(require_admin)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    ensure_selection(payload.user_ids)
    await gateway.update("profiles", {"approved": True}, in_filters={"id": payload.user_ids})
    logger.info(
        "Users approved",
        extra={"extra_fields": {"admin_id": admin.id, "count": len(payload.user_ids)}},
    )
    count = len(payload.user_ids)
    return BulkActionResponse(affected=count, message=f"Approved {_plural(count)}")


@router.post("/unapprove", response_model=BulkActionResponse)
async def unapprove_users(
    payload: UserSelection,
    admin: Annotated[Profile, Depends(require_admin)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    ensure_can_unapprove(admin, payload.user_ids, await load_users(gateway))
    await gateway.update("profiles", {"approved": False}, in_filters={"id": payload.user_ids})
    count = len(payload.user_ids)
    return BulkActionResponse(affected=count, message=f"Unapproved {_plural(count)}")


# ── Roles ───────────────────────────────────────────────────────────


@router.patch("/{user_id}/role", response_model=UserResponse)
async def change_role(
    user_id: str,
    payload: RoleChange,
    admin: Annotated[Profile, Depends(require_admin)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    ensure_can_change_role(admin, user_id, payload.role, payload.confirmation)

    updated = await gateway.update(
        "profiles", {"role": payload.role.value}, filters={"id": user_id}
    )
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info(
        "User role changed",
        extra={
            "extra_fields": {
                "admin_id": admin.id,
                "user_id": user_id,
                "role": payload.role.value,
            }
        },
    )
    users = {u.id: u for u in await load_users(gateway)}
    if user_id not in users:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse(**users[user_id].model_dump())


# ── Removal ─────────────────────────────────────────────────────────


@router.post("/remove", response_model=BulkActionResponse)
async def remove_users(
    payload: UserSelection,
    admin: Annotated[Profile, Depends(require_admin)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    ensure_can_remove(admin, payload.user_ids)
    await delete_members(gateway, payload.user_ids)
    count = len(payload.user_ids)
    return BulkActionResponse(affected=count, message=f"Removed {_plural(count)}")


@router.delete("/{user_id}", response_model=BulkActionResponse)
async def remove_user(
    user_id: str,
    admin: Annotated[Profile, Depends(require_admin)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    ensure_can_remove(admin, [user_id])
    await delete_members(gateway, [user_id])
    return BulkActionResponse(affected=1, message="Removed 1 user")
