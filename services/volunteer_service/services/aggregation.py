"""Service-hour roll-ups per member, per trimester and per category."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping

from libs.common.logging import get_logger
from services.volunteer_service.models import (
    TRIMESTERS,
    EntryStatus,
    HourCategory,
    ServiceHourEntry,
)

logger = get_logger(__name__)

# category -> HourVector field
_SLOTS: Mapping[str, str] = {
    HourCategory.IN_SCHOOL.value: "in_school",
    HourCategory.OUT_OF_SCHOOL.value: "out_of_school",
    HourCategory.RED_HOOK.value: "red_hook",
}


@dataclass(frozen=True)
class HourVector:
    in_school: float = 0.0
    out_of_school: float = 0.0
    red_hook: float = 0.0

    @property
    def overall(self) -> float:
        return self.in_school + self.out_of_school + self.red_hook

    @classmethod
    def zero(cls) -> "HourVector":
        return cls()

    def add(self, other: "HourVector") -> "HourVector":
        return HourVector(
            in_school=self.in_school + other.in_school,
            out_of_school=self.out_of_school + other.out_of_school,
            red_hook=self.red_hook + other.red_hook,
        )

    def get(self, category: HourCategory) -> float:
        return getattr(self, _SLOTS[category.value])

    def as_dict(self) -> dict[str, float]:
        return {
            "inSchool": self.in_school,
            "outSchool": self.out_of_school,
            "redHook": self.red_hook,
            "overall": self.overall,
        }


@dataclass(frozen=True)
class MemberHours:
    total: HourVector = field(default_factory=HourVector)
    trimesters: Mapping[int, HourVector] = field(
        default_factory=lambda: {t: HourVector() for t in TRIMESTERS}
    )

    def trimester(self, number: int) -> HourVector:
        return self.trimesters.get(number, HourVector())

    def selected(self, trimesters: Iterable[int]) -> HourVector:
        return select_trimesters(self, trimesters)

    def as_dict(self) -> dict[str, dict[str, float]]:
        data = {"total": self.total.as_dict()}
        for number in TRIMESTERS:
            data[f"trimester{number}"] = self.trimester(number).as_dict()
        return data


def _hours_value(entry: ServiceHourEntry) -> float:
    hours = entry.hours
    if hours is None or hours != hours:  # NaN
        return 0.0
    return float(hours)


def aggregate_entries(entries: Iterable[ServiceHourEntry]) -> MemberHours:
    """Sum completed entries into total and per-trimester vectors."""
    total: dict[str, float] = defaultdict(float)
    per_trimester: dict[int, dict[str, float]] = {t: defaultdict(float) for t in TRIMESTERS}

    for entry in entries:
        if entry.status != EntryStatus.COMPLETED:
            continue
        slot = _SLOTS.get(entry.category or "")
        if slot is None:
            logger.warning(
                "Ignoring service-hour entry with unknown category",
                extra={"extra_fields": {"entry_id": entry.id, "category": entry.category}},
            )
            continue
        value = _hours_value(entry)
        total[slot] += value
        if entry.trimester in per_trimester:
            per_trimester[entry.trimester][slot] += value

    return MemberHours(
        total=HourVector(**total),
        trimesters={t: HourVector(**sums) for t, sums in per_trimester.items()},
    )


def aggregate_by_member(entries: Iterable[ServiceHourEntry]) -> dict[str, MemberHours]:
    grouped: dict[str, list[ServiceHourEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.user_id].append(entry)
    return {user_id: aggregate_entries(items) for user_id, items in grouped.items()}


def normalize_trimesters(trimesters: Iterable[int]) -> tuple[int, ...]:
    """Sorted, de-duplicated selection restricted to known trimesters."""
    return tuple(sorted({t for t in trimesters if t in TRIMESTERS}))


def select_trimesters(hours: MemberHours, trimesters: Iterable[int]) -> HourVector:
    selected = HourVector()
    for number in normalize_trimesters(trimesters):
        selected = selected.add(hours.trimester(number))
    return selected


def default_trimesters(today: date) -> tuple[int, ...]:
    """Trimesters elapsed so far in the school year containing ``today``."""
    if 9 <= today.month <= 12:
        return (1,)
    if 1 <= today.month <= 2:
        return (1, 2)
    return (1, 2, 3)


def trimester_label(trimesters: Iterable[int]) -> str:
    selection = normalize_trimesters(trimesters)
    if not selection:
        return "Select Trimesters"
    if len(selection) == len(TRIMESTERS):
        return "All Trimesters"
    return ", ".join(f"T{t}" for t in selection)
