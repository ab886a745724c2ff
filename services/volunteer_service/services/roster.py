"""Filtering, sorting and column totals for the member catalogue."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional, Sequence

from services.volunteer_service.models import GRADES, TRIMESTERS
from services.volunteer_service.services.aggregation import (
    HourVector,
    MemberHours,
    normalize_trimesters,
    trimester_label,
)
from services.volunteer_service.services.eligibility import (
    Classification,
    classify,
    thresholds,
)


class SortKey(str, enum.Enum):
    NAME = "name"
    TOTAL = "total"
    GRADE = "grade"
    IN_SCHOOL = "inSchool"
    OUT_SCHOOL = "outSchool"
    RED_HOOK = "redHook"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class RosterMember:
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    grade: Optional[int] = None
    hours: MemberHours = field(default_factory=MemberHours)

    @classmethod
    def from_row(cls, row: Mapping, hours: Optional[MemberHours] = None) -> "RosterMember":
        return cls(
            id=str(row["id"]),
            first_name=row.get("first_name") or "",
            last_name=row.get("last_name") or "",
            email=row.get("email") or "",
            grade=row.get("grade"),
            hours=hours or MemberHours(),
        )


@dataclass(frozen=True)
class RosterQuery:
    search: str = ""
    grades: frozenset[int] = frozenset(GRADES)
    min_hours: Optional[float] = None
    trimesters: tuple[int, ...] = TRIMESTERS
    sort_by: SortKey = SortKey.NAME
    sort_order: SortOrder = SortOrder.ASC


@dataclass(frozen=True)
class RosterRow:
    member: RosterMember
    selected: HourVector
    classification: Optional[Classification]


@dataclass(frozen=True)
class RosterView:
    rows: list[RosterRow]
    totals: HourVector
    trimesters: tuple[int, ...]
    trimester_label: str
    thresholds: Optional[dict[str, float]]


def matches_search(member: RosterMember, search: str) -> bool:
    needle = search.lower()
    if not needle:
        return True
    full_name = f"{member.first_name} {member.last_name}".lower()
    return needle in full_name or needle in member.email.lower()


def filter_roster(
    members: Iterable[RosterMember], query: RosterQuery
) -> list[RosterMember]:
    trimesters = normalize_trimesters(query.trimesters)
    kept = []
    for member in members:
        if not matches_search(member, query.search):
            continue
        if member.grade not in query.grades:
            continue
        if query.min_hours is not None:
            if member.hours.selected(trimesters).overall < query.min_hours:
                continue
        kept.append(member)
    return kept


def _sort_value(key: SortKey, trimesters: Sequence[int]) -> Callable[[RosterMember], object]:
    if key == SortKey.NAME:
        return lambda m: f"{m.last_name} {m.first_name}".lower()
    if key == SortKey.GRADE:
        return lambda m: m.grade or 0

    field_name = {
        SortKey.TOTAL: "overall",
        SortKey.IN_SCHOOL: "in_school",
        SortKey.OUT_SCHOOL: "out_of_school",
        SortKey.RED_HOOK: "red_hook",
    }[key]
    return lambda m: getattr(m.hours.selected(trimesters), field_name)


def sort_roster(
    members: Iterable[RosterMember],
    sort_by: SortKey,
    sort_order: SortOrder,
    trimesters: Sequence[int],
) -> list[RosterMember]:
    """Stable sort; members with equal keys keep their input order either way."""
    return sorted(
        members,
        key=_sort_value(sort_by, normalize_trimesters(trimesters)),
        reverse=sort_order == SortOrder.DESC,
    )


def column_totals(members: Iterable[RosterMember], trimesters: Sequence[int]) -> HourVector:
    totals = HourVector()
    for member in members:
        totals = totals.add(member.hours.selected(trimesters))
    return totals


def toggle_sort(
    current_key: SortKey, current_order: SortOrder, new_key: SortKey
) -> tuple[SortKey, SortOrder]:
    """Clicking the active column flips direction; a new column starts ascending."""
    if new_key == current_key:
        flipped = SortOrder.DESC if current_order == SortOrder.ASC else SortOrder.ASC
        return current_key, flipped
    return new_key, SortOrder.ASC


def build_roster(
    members: Iterable[Mapping],
    hours_by_member: Mapping[str, MemberHours],
    query: RosterQuery,
) -> RosterView:
    trimesters = normalize_trimesters(query.trimesters)
    roster = [
        RosterMember.from_row(row, hours_by_member.get(str(row["id"])))
        for row in members
    ]
    visible = sort_roster(
        filter_roster(roster, query), query.sort_by, query.sort_order, trimesters
    )

    k = len(trimesters)
    rows = []
    for member in visible:
        selected = member.hours.selected(trimesters)
        rows.append(
            RosterRow(
                member=member,
                selected=selected,
                classification=classify(selected, k) if k else None,
            )
        )

    return RosterView(
        rows=rows,
        totals=column_totals(visible, trimesters),
        trimesters=trimesters,
        trimester_label=trimester_label(trimesters),
        thresholds=thresholds(k) if k else None,
    )


def grade_label(grades: Iterable[int]) -> str:
    selection = sorted(set(grades))
    if not selection:
        return "Select Grades"
    if len(selection) == len(GRADES):
        return "All Grades"
    return ", ".join(f"Grade {g}" for g in selection)
