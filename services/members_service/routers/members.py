"""Settings: the caller's own profile, password and account."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from libs.auth.dependencies import (
    get_current_user,
    get_gateway,
    load_profile,
    require_approved,
)
from libs.auth.models import AuthUser, Profile
from libs.common.logging import get_logger
from libs.common.supabase import AuthGateway, SupabaseGateway, get_auth_gateway
from services.members_service.models import DELETE_CONFIRMATION
from services.members_service.schemas import AccountDeletion, PasswordChange, ProfileUpdate
from services.members_service.services.accounts import (
    delete_members,
    validate_grade,
    validate_new_password,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/members/me", tags=["members"])


@router.get("", response_model=Profile)
async def get_my_profile(profile: Annotated[Profile, Depends(require_approved)]):
    return profile


@router.patch("", response_model=Profile)
async def update_my_profile(
    payload: ProfileUpdate,
    profile: Annotated[Profile, Depends(require_approved)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    values = {
        "first_name": payload.first_name.strip(),
        "last_name": payload.last_name.strip(),
    }
    if not profile.is_admin:
        validate_grade(payload.grade)
        values["grade"] = payload.grade or None

    await gateway.update("profiles", values, filters={"id": profile.id})
    updated = await load_profile(gateway, profile.id)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return updated


@router.post("/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    payload: PasswordChange,
    profile: Annotated[Profile, Depends(require_approved)],
    auth: Annotated[AuthGateway, Depends(get_auth_gateway)],
):
    validate_new_password(
        payload.new_password, payload.confirm_password, "New passwords do not match"
    )
    await auth.update_password(profile.id, payload.new_password)
    logger.info("Password changed", extra={"extra_fields": {"user_id": profile.id}})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_account(
    payload: AccountDeletion,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    profile: Annotated[Profile, Depends(require_approved)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
    auth: Annotated[AuthGateway, Depends(get_auth_gateway)],
):
    if payload.confirmation != DELETE_CONFIRMATION:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Type "DELETE" to confirm account deletion',
        )
    await delete_members(gateway, [profile.id], drop_auth_users=False)
    await auth.sign_out(current_user.token or "")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
