"""Pydantic schemas for the Volunteer Service."""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from services.volunteer_service.models import EntryStatus, HourCategory
from services.volunteer_service.services.signature import DisplaySize, Point, Stroke

# ============================================================================
# SIGNATURE INPUT
# ============================================================================


class PointIn(BaseModel):
    x: float
    y: float


class StrokeIn(BaseModel):
    """One pen-down..pen-up path in device coordinates of the displayed pad."""

    points: list[PointIn]
    display_width: float = Field(..., gt=0)
    display_height: float = Field(..., gt=0)

    def to_stroke(self) -> Stroke:
        return Stroke(
            points=[Point(p.x, p.y) for p in self.points],
            display=DisplaySize(self.display_width, self.display_height),
        )


# ============================================================================
# ENTRY SCHEMAS
# ============================================================================


class ServiceHourEntryWrite(BaseModel):
    description: Optional[str] = Field(None, max_length=500)
    hours: Optional[float] = Field(None, ge=0)
    date: Optional[dt.date] = None
    trimester: Optional[Literal[1, 2, 3]] = None
    category: Optional[HourCategory] = None
    supervisor_name: Optional[str] = None
    status: EntryStatus = EntryStatus.IN_PROGRESS
    # Either a data URL from the browser canvas or raw strokes to rasterise.
    signature: Optional[str] = None
    strokes: Optional[list[StrokeIn]] = None


class ServiceHourEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    hours: Optional[float] = None
    category: Optional[str] = None
    trimester: Optional[int] = None
    date: Optional[dt.date] = None
    description: Optional[str] = None
    supervisor_name: Optional[str] = None
    signature: Optional[str] = None
    status: EntryStatus
    created_at: Optional[dt.datetime] = None


class HoursVectorResponse(BaseModel):
    inSchool: float = 0
    outSchool: float = 0
    redHook: float = 0
    overall: float = 0


class MyHoursResponse(BaseModel):
    summary: HoursVectorResponse
    in_progress: list[ServiceHourEntryResponse]
    completed: list[ServiceHourEntryResponse]


# ============================================================================
# CATALOGUE SCHEMAS
# ============================================================================


class CellStatus(BaseModel):
    status: str
    color: str


class CatalogueRow(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    grade: Optional[int] = None
    hours: dict[str, HoursVectorResponse]
    selected: HoursVectorResponse
    classification: Optional[dict[str, CellStatus]] = None


class CatalogueResponse(BaseModel):
    rows: list[CatalogueRow]
    totals: HoursVectorResponse
    trimesters: list[int]
    trimester_label: str
    grade_label: str
    thresholds: Optional[dict[str, float]] = None
    sort_by: str
    sort_order: str


# ============================================================================
# SIGNATURE REVIEW SCHEMAS
# ============================================================================


class SignatureReviewItem(ServiceHourEntryResponse):
    student_first_name: str = "Unknown"
    student_last_name: str = ""
    student_grade: Optional[int] = None
    category_label: Optional[str] = None


class SignatureReviewResponse(BaseModel):
    signatures: list[SignatureReviewItem]
    count: int
    grades: list[int]
