"""My Hours: a member's own service-hour entries."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from libs.auth.dependencies import get_gateway, require_member_hours
from libs.auth.models import Profile
from libs.common.logging import get_logger
from libs.common.supabase import SupabaseGateway
from services.volunteer_service.models import EntryStatus
from services.volunteer_service.schemas import MyHoursResponse, ServiceHourEntryWrite
from services.volunteer_service.services.entries import (
    COMPLETED_EDIT_MESSAGE,
    ensure_owner_mutable,
    entry_values,
    resolve_signature,
    validate_entry,
)
from services.volunteer_service.services.queries import TABLE, fetch_entry, load_my_hours

logger = get_logger(__name__)

router = APIRouter(prefix="/volunteer/hours", tags=["volunteer"])


@router.get("", response_model=MyHoursResponse)
async def list_my_hours(
    profile: Annotated[Profile, Depends(require_member_hours)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    return await load_my_hours(gateway, profile.id)


@router.post("", response_model=MyHoursResponse, status_code=201)
async def create_entry(
    payload: ServiceHourEntryWrite,
    profile: Annotated[Profile, Depends(require_member_hours)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    signature = resolve_signature(payload)
    validate_entry(payload, signature)

    row = await gateway.insert(
        TABLE, {"user_id": profile.id, **entry_values(payload, signature)}
    )
    logger.info(
        "Service-hour entry created",
        extra={"extra_fields": {"entry_id": row.get("id"), "status": payload.status.value}},
    )
    return await load_my_hours(gateway, profile.id)


@router.patch("/{entry_id}", response_model=MyHoursResponse)
async def update_entry(
    entry_id: str,
    payload: ServiceHourEntryWrite,
    profile: Annotated[Profile, Depends(require_member_hours)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    entry = ensure_owner_mutable(await fetch_entry(gateway, entry_id), profile.id)

    signature = resolve_signature(payload, existing=entry.signature)
    validate_entry(payload, signature)

    # Guarded on the stored status so a concurrent completion is not overwritten.
    updated = await gateway.update(
        TABLE,
        entry_values(payload, signature),
        filters={
            "id": entry_id,
            "user_id": profile.id,
            "status": EntryStatus.IN_PROGRESS.value,
        },
    )
    if not updated:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=COMPLETED_EDIT_MESSAGE
        )
    return await load_my_hours(gateway, profile.id)


@router.delete("/{entry_id}", response_model=MyHoursResponse)
async def delete_entry(
    entry_id: str,
    profile: Annotated[Profile, Depends(require_member_hours)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    ensure_owner_mutable(await fetch_entry(gateway, entry_id), profile.id)

    deleted = await gateway.delete(
        TABLE,
        filters={
            "id": entry_id,
            "user_id": profile.id,
            "status": EntryStatus.IN_PROGRESS.value,
        },
    )
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=COMPLETED_EDIT_MESSAGE
        )
    return await load_my_hours(gateway, profile.id)
