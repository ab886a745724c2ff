"""Threshold classification of selected service hours.

Thresholds are per trimester and scale linearly with the number of
trimesters in the selection.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from services.volunteer_service.models import HourCategory
from services.volunteer_service.services.aggregation import HourVector

CATEGORY_THRESHOLDS: dict[HourCategory, float] = {
    HourCategory.IN_SCHOOL: 5,
    HourCategory.OUT_OF_SCHOOL: 5,
    HourCategory.RED_HOOK: 3,
}
OVERALL_THRESHOLD = 15


class Eligibility(str, enum.Enum):
    DEFICIENT = "deficient"
    PARTIAL = "partial"
    SATISFIED = "satisfied"


CATEGORY_COLORS = {
    Eligibility.DEFICIENT: "#8B0000",
    Eligibility.PARTIAL: "#808080",
    Eligibility.SATISFIED: "#28a745",
}
OVERALL_COLORS = {
    Eligibility.DEFICIENT: "#D3D3D3",
    Eligibility.PARTIAL: "#808080",
    Eligibility.SATISFIED: "#28a745",
}


@dataclass(frozen=True)
class Classification:
    in_school: Eligibility
    out_of_school: Eligibility
    red_hook: Eligibility
    overall: Eligibility

    @property
    def categories(self) -> tuple[Eligibility, Eligibility, Eligibility]:
        return (self.in_school, self.out_of_school, self.red_hook)

    def as_dict(self) -> dict[str, dict[str, str]]:
        cells = {
            "inSchool": self.in_school,
            "outSchool": self.out_of_school,
            "redHook": self.red_hook,
        }
        data = {
            key: {"status": value.value, "color": CATEGORY_COLORS[value]}
            for key, value in cells.items()
        }
        data["overall"] = {
            "status": self.overall.value,
            "color": OVERALL_COLORS[self.overall],
        }
        return data


def _check_k(k: int) -> None:
    if k < 1:
        raise ValueError("at least one trimester must be selected")


def thresholds(k: int) -> dict[str, float]:
    _check_k(k)
    return {
        "inSchool": CATEGORY_THRESHOLDS[HourCategory.IN_SCHOOL] * k,
        "outSchool": CATEGORY_THRESHOLDS[HourCategory.OUT_OF_SCHOOL] * k,
        "redHook": CATEGORY_THRESHOLDS[HourCategory.RED_HOOK] * k,
        "overall": OVERALL_THRESHOLD * k,
    }


def classify_category(value: float, category: HourCategory, k: int) -> Eligibility:
    _check_k(k)
    if value == 0:
        return Eligibility.DEFICIENT
    if value < CATEGORY_THRESHOLDS[category] * k:
        return Eligibility.PARTIAL
    return Eligibility.SATISFIED


def classify_overall(vector: HourVector, k: int) -> Eligibility:
    _check_k(k)
    if vector.overall == 0:
        return Eligibility.DEFICIENT
    if any(
        classify_category(vector.get(category), category, k) == Eligibility.PARTIAL
        for category in HourCategory
    ):
        return Eligibility.PARTIAL
    if vector.overall < OVERALL_THRESHOLD * k:
        return Eligibility.PARTIAL
    return Eligibility.SATISFIED


def classify(vector: HourVector, k: int) -> Classification:
    return Classification(
        in_school=classify_category(vector.in_school, HourCategory.IN_SCHOOL, k),
        out_of_school=classify_category(vector.out_of_school, HourCategory.OUT_OF_SCHOOL, k),
        red_hook=classify_category(vector.red_hook, HourCategory.RED_HOOK, k),
        overall=classify_overall(vector, k),
    )


def color_for(status: Eligibility, overall: bool = False) -> str:
    return (OVERALL_COLORS if overall else CATEGORY_COLORS)[status]
