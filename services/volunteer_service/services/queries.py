"""Fetch-and-recompute helpers shared by the HTTP routes and live views.

Each helper re-reads everything it needs from the backend; calling it twice
for the same change is harmless.
"""

import datetime as dt
from typing import Optional, Sequence

from libs.common.supabase import Order, SupabaseGateway
from services.volunteer_service.models import (
    GRADES,
    EntryStatus,
    HourCategory,
    ServiceHourEntry,
)
from services.volunteer_service.schemas import (
    CatalogueResponse,
    CatalogueRow,
    HoursVectorResponse,
    MyHoursResponse,
    ServiceHourEntryResponse,
    SignatureReviewItem,
    SignatureReviewResponse,
)
from services.volunteer_service.services.aggregation import (
    HourVector,
    aggregate_by_member,
    aggregate_entries,
    default_trimesters,
)
from services.volunteer_service.services.roster import (
    RosterQuery,
    SortKey,
    SortOrder,
    build_roster,
    grade_label,
)

TABLE = "service_hours"


def _vector(vector: HourVector) -> HoursVectorResponse:
    return HoursVectorResponse(**vector.as_dict())


async def fetch_entry(gateway: SupabaseGateway, entry_id: str) -> Optional[ServiceHourEntry]:
    row = await gateway.select_one(TABLE, filters={"id": entry_id})
    return ServiceHourEntry(**row) if row else None


async def load_my_hours(gateway: SupabaseGateway, user_id: str) -> MyHoursResponse:
    rows = await gateway.select(
        TABLE, filters={"user_id": user_id}, order=[Order("created_at", desc=True)]
    )
    entries = [ServiceHourEntry(**row) for row in rows]
    summary = aggregate_entries(entries).total

    def _response(entry: ServiceHourEntry) -> ServiceHourEntryResponse:
        return ServiceHourEntryResponse.model_validate(entry)

    return MyHoursResponse(
        summary=_vector(summary),
        in_progress=[_response(e) for e in entries if not e.is_completed],
        completed=[_response(e) for e in entries if e.is_completed],
    )


async def load_catalogue(gateway: SupabaseGateway, query: RosterQuery) -> CatalogueResponse:
    members = await gateway.rpc("get_member_emails") or []
    rows = await gateway.select(TABLE, filters={"status": EntryStatus.COMPLETED.value})
    hours_by_member = aggregate_by_member(ServiceHourEntry(**row) for row in rows)

    view = build_roster(members, hours_by_member, query)
    return CatalogueResponse(
        rows=[
            CatalogueRow(
                id=row.member.id,
                first_name=row.member.first_name,
                last_name=row.member.last_name,
                email=row.member.email,
                grade=row.member.grade,
                hours={
                    key: HoursVectorResponse(**value)
                    for key, value in row.member.hours.as_dict().items()
                },
                selected=_vector(row.selected),
                classification=row.classification.as_dict() if row.classification else None,
            )
            for row in view.rows
        ],
        totals=_vector(view.totals),
        trimesters=list(view.trimesters),
        trimester_label=view.trimester_label,
        grade_label=grade_label(query.grades),
        thresholds=view.thresholds,
        sort_by=query.sort_by.value,
        sort_order=query.sort_order.value,
    )


def _signature_matches(
    item: SignatureReviewItem,
    search: str,
    trimester: Optional[int],
    category: Optional[HourCategory],
    grade: Optional[int],
) -> bool:
    needle = search.lower()
    full_name = f"{item.student_first_name} {item.student_last_name}".lower()
    supervisor = (item.supervisor_name or "").lower()
    if needle not in full_name and needle not in supervisor:
        return False
    if trimester is not None and item.trimester != trimester:
        return False
    if category is not None and item.category != category.value:
        return False
    if grade is not None and item.student_grade != grade:
        return False
    return True


async def load_signatures(
    gateway: SupabaseGateway,
    search: str = "",
    trimester: Optional[int] = None,
    category: Optional[HourCategory] = None,
    grade: Optional[int] = None,
) -> SignatureReviewResponse:
    rows = await gateway.select(
        TABLE,
        filters={"status": EntryStatus.COMPLETED.value},
        not_null=["signature"],
        order=[Order("date", desc=True)],
    )
    user_ids = sorted({row["user_id"] for row in rows})
    profiles = await gateway.select(
        "profiles", "id, first_name, last_name, grade", in_filters={"id": user_ids}
    )
    by_id = {p["id"]: p for p in profiles}

    labels = {c.value: c.label for c in HourCategory}
    items = []
    for row in rows:
        profile = by_id.get(row["user_id"], {})
        entry = ServiceHourEntry(**row)
        items.append(
            SignatureReviewItem(
                **ServiceHourEntryResponse.model_validate(entry).model_dump(),
                student_first_name=profile.get("first_name") or "Unknown",
                student_last_name=profile.get("last_name") or "",
                student_grade=profile.get("grade"),
                category_label=labels.get(entry.category or "", entry.category),
            )
        )

    grades = sorted({i.student_grade for i in items if i.student_grade is not None})
    visible = [i for i in items if _signature_matches(i, search, trimester, category, grade)]
    return SignatureReviewResponse(signatures=visible, count=len(visible), grades=grades)


def catalogue_query(
    today: dt.date,
    search: str = "",
    grades: Optional[Sequence[int]] = None,
    min_hours: Optional[float] = None,
    trimesters: Optional[Sequence[int]] = None,
    sort_by: SortKey = SortKey.NAME,
    sort_order: SortOrder = SortOrder.ASC,
) -> RosterQuery:
    """Omitted grades mean all grades; omitted trimesters mean those elapsed so far."""
    return RosterQuery(
        search=search,
        grades=frozenset(GRADES if grades is None else grades),
        min_hours=min_hours,
        trimesters=default_trimesters(today) if trimesters is None else tuple(trimesters),
        sort_by=sort_by,
        sort_order=sort_order,
    )
