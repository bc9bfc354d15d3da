from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from eventhub.core.config import settings
from eventhub.core.database import get_db
from eventhub.core.exceptions import ValidationError, FeatureDisabledError
from eventhub.core.logging_config import logger
from eventhub.core.session_store import SessionData
from eventhub.modules.auth.dependencies import get_current_session
from eventhub.schemas.attendance import (
    MarkAttendanceRequest,
    ScanAttendanceRequest,
    ScanAttendanceResponse,
)
from eventhub.schemas.auth import MessageResponse
from eventhub.services.event_service import parse_event_id
from eventhub.services.participation_service import attendance_marker, PARTICIPANT, VOLUNTEER
from eventhub.services.qr_service import parse_qr_payload

router = APIRouter()


def _require_fields(body: MarkAttendanceRequest) -> int:
    if body.eventId in (None, "") or not body.usn:
        raise ValidationError("USN and Event ID are required")
    return parse_event_id(body.eventId)


@router.post("/mark-participant-attendance", response_model=MessageResponse)
async def mark_participant_attendance(
    body: MarkAttendanceRequest,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    """Mark the caller's own participant attendance (target of a QR scan)"""
    event_id = _require_fields(body)
    await attendance_marker.mark_own(db, PARTICIPANT, event_id, body.usn, current.usn)
    return MessageResponse(message="Participant attendance marked successfully")


@router.post("/mark-volunteer-attendance", response_model=MessageResponse)
async def mark_volunteer_attendance(
    body: MarkAttendanceRequest,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    """Mark the caller's own volunteer attendance (target of a QR scan)"""
    event_id = _require_fields(body)
    await attendance_marker.mark_own(db, VOLUNTEER, event_id, body.usn, current.usn)
    return MessageResponse(message="Volunteer attendance marked successfully")


@router.post("/scan-attendance", response_model=ScanAttendanceResponse)
async def scan_attendance(
    body: ScanAttendanceRequest,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    """
    Mark attendance from raw QR text ("eventId:<id>") as read by the scanner.
    Identity always comes from the session.
    """
    event_id = parse_qr_payload(body.qrText)
    await attendance_marker.mark_own(db, body.role, event_id, current.usn, current.usn)
    return ScanAttendanceResponse(
        message=f"{body.role.capitalize()} attendance marked successfully",
        eventId=event_id,
    )


@router.get("/scan-qr", response_model=MessageResponse, deprecated=True)
async def scan_qr(
    usn: Optional[str] = Query(None),
    eid: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """
    Legacy check-in used by old scanner builds. Not session-gated: anyone
    with a USN and event id can mark that participant. Disable with
    LEGACY_SCAN_QR_ENABLED=false.
    """
    if not settings.LEGACY_SCAN_QR_ENABLED:
        raise FeatureDisabledError("scan-qr")

    logger.warning(
        "Deprecated /api/scan-qr called; use /api/mark-participant-attendance",
        extra={"event_type": "deprecated_endpoint", "http_path": "/api/scan-qr"}
    )

    if not usn or not eid:
        raise ValidationError("USN and Event ID are required")

    await attendance_marker.mark_explicit(db, PARTICIPANT, parse_event_id(eid), usn)
    return MessageResponse(message="Participant status updated to checked in")
