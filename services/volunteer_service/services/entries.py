"""Lifecycle rules for service-hour entries (draft -> completed)."""

from typing import Any, Optional

from fastapi import HTTPException, status

from services.volunteer_service.models import EntryStatus, ServiceHourEntry
from services.volunteer_service.schemas import ServiceHourEntryWrite
from services.volunteer_service.services.signature import Stroke, capture_signature

COMPLETED_EDIT_MESSAGE = (
    "Cannot edit completed hours. Please contact an administrator if changes are needed."
)


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def resolve_signature(
    payload: ServiceHourEntryWrite, existing: Optional[str] = None
) -> Optional[str]:
    """Newly drawn/uploaded signature if non-blank, else whatever was stored."""
    strokes: Optional[list[Stroke]] = (
        [s.to_stroke() for s in payload.strokes] if payload.strokes is not None else None
    )
    try:
        captured = capture_signature(strokes=strokes, data_url=payload.signature)
    except ValueError as exc:
        raise _bad_request(str(exc)) from exc
    return captured or existing


def validate_draft(payload: ServiceHourEntryWrite) -> None:
    if not payload.description:
        raise _bad_request("Please enter a description")


def validate_completion(payload: ServiceHourEntryWrite, signature: Optional[str]) -> None:
    required = (
        payload.hours,
        payload.description,
        payload.date,
        payload.trimester,
        payload.category,
        payload.supervisor_name,
    )
    if any(value is None or value == "" for value in required):
        raise _bad_request("Please fill in all required fields to mark as completed")
    if payload.hours <= 0:
        raise _bad_request("Hours must be greater than 0")
    if not signature:
        raise _bad_request("Please provide a signature to mark as completed")


def validate_entry(payload: ServiceHourEntryWrite, signature: Optional[str]) -> None:
    """Completion checks first (they cover a missing description too)."""
    if payload.status == EntryStatus.COMPLETED:
        validate_completion(payload, signature)
    validate_draft(payload)


def entry_values(payload: ServiceHourEntryWrite, signature: Optional[str]) -> dict[str, Any]:
    """Column values written for both inserts and updates."""
    return {
        "description": payload.description,
        "hours": payload.hours,
        "date": payload.date.isoformat() if payload.date else None,
        "trimester": payload.trimester,
        "category": payload.category.value if payload.category else None,
        "supervisor_name": payload.supervisor_name or None,
        "signature": signature,
        "status": payload.status.value,
    }


def ensure_owner_mutable(entry: Optional[ServiceHourEntry], user_id: str) -> ServiceHourEntry:
    if entry is None or entry.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")
    if entry.is_completed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=COMPLETED_EDIT_MESSAGE
        )
    return entry
