"""Admin signature review."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException

from libs.auth.dependencies import get_gateway, require_admin
from libs.auth.models import Profile
from libs.common.logging import get_logger
from libs.common.supabase import SupabaseGateway
from services.volunteer_service.models import EntryStatus, HourCategory
from services.volunteer_service.schemas import SignatureReviewResponse
from services.volunteer_service.services.queries import TABLE, fetch_entry, load_signatures

logger = get_logger(__name__)

router = APIRouter(prefix="/volunteer/signatures", tags=["admin-signatures"])


@router.get("", response_model=SignatureReviewResponse)
async def list_signatures(
    _: Annotated[Profile, Depends(require_admin)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
    search: str = "",
    trimester: Optional[int] = None,
    category: Optional[HourCategory] = None,
    grade: Optional[int] = None,
):
    return await load_signatures(
        gateway, search=search, trimester=trimester, category=category, grade=grade
    )


@router.delete("/{entry_id}", response_model=SignatureReviewResponse)
async def delete_signed_entry(
    entry_id: str,
    admin: Annotated[Profile, Depends(require_admin)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
):
    entry = await fetch_entry(gateway, entry_id)
    if entry is None or entry.status != EntryStatus.COMPLETED:
        raise HTTPException(status_code=404, detail="Entry not found")

    await gateway.delete(TABLE, filters={"id": entry_id})
    logger.info(
        "Completed service-hour entry deleted by admin",
        extra={"extra_fields": {"entry_id": entry_id, "admin_id": admin.id}},
    )
    return await load_signatures(gateway)
