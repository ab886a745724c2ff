"""Member catalogue: per-member hour totals with eligibility colouring."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from libs.auth.dependencies import get_gateway, require_leader
from libs.auth.models import Profile
from libs.common.datetime_utils import local_today
from libs.common.supabase import SupabaseGateway
from services.volunteer_service.schemas import CatalogueResponse
from services.volunteer_service.services.queries import catalogue_query, load_catalogue
from services.volunteer_service.services.roster import SortKey, SortOrder

router = APIRouter(prefix="/volunteer/catalogue", tags=["catalogue"])


def parse_int_list(values: Optional[list[str]], name: str) -> Optional[list[int]]:
    """``?grades=`` (blank) is an explicit empty selection; absence means default."""
    if values is None:
        return None
    parsed = []
    for value in values:
        if value == "":
            continue
        try:
            parsed.append(int(value))
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid value for {name}: {value}",
            )
    return parsed


@router.get("", response_model=CatalogueResponse)
async def get_catalogue(
    _: Annotated[Profile, Depends(require_leader)],
    gateway: Annotated[SupabaseGateway, Depends(get_gateway)],
    search: str = "",
    grades: Annotated[Optional[list[str]], Query()] = None,
    min_hours: Optional[float] = None,
    trimesters: Annotated[Optional[list[str]], Query()] = None,
    sort_by: SortKey = SortKey.NAME,
    sort_order: SortOrder = SortOrder.ASC,
):
    query = catalogue_query(
        local_today(),
        search=search,
        grades=parse_int_list(grades, "grades"),
        min_hours=min_hours,
        trimesters=parse_int_list(trimesters, "trimesters"),
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return await load_catalogue(gateway, query)
