"""Volunteer Service business logic package."""

from services.volunteer_service.services.aggregation import (
    HourVector,
    MemberHours,
    aggregate_by_member,
    aggregate_entries,
    default_trimesters,
    normalize_trimesters,
    select_trimesters,
    trimester_label,
)
from services.volunteer_service.services.eligibility import (
    Classification,
    Eligibility,
    classify,
    classify_category,
    classify_overall,
    thresholds,
)
from services.volunteer_service.services.roster import (
    RosterMember,
    RosterQuery,
    RosterView,
    SortKey,
    SortOrder,
    build_roster,
    column_totals,
    filter_roster,
    sort_roster,
    toggle_sort,
)
from services.volunteer_service.services.signature import (
    SignatureCanvas,
    capture_signature,
)

__all__ = [
    "Classification",
    "Eligibility",
    "HourVector",
    "MemberHours",
    "RosterMember",
    "RosterQuery",
    "RosterView",
    "SignatureCanvas",
    "SortKey",
    "SortOrder",
    "aggregate_by_member",
    "aggregate_entries",
    "build_roster",
    "capture_signature",
    "classify",
    "classify_category",
    "classify_overall",
    "column_totals",
    "default_trimesters",
    "filter_roster",
    "normalize_trimesters",
    "select_trimesters",
    "sort_roster",
    "thresholds",
    "toggle_sort",
    "trimester_label",
]
