from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date

from eventhub.core.database import get_db
from eventhub.core.exceptions import ForbiddenError
from eventhub.core.session_store import SessionData
from eventhub.modules.auth.dependencies import get_current_session
from eventhub.schemas.auth import MessageResponse
from eventhub.schemas.event import (
    EventCreateRequest,
    EventCreateResponse,
    EventDetail,
    EventListResponse,
    CountResponse,
    ParticipantEventsResponse,
    VolunteerEventsResponse,
    OrganizedEventsResponse,
)
from eventhub.services.event_service import event_service, serialize_event, parse_event_id
from eventhub.services.participation_service import participation_service
from eventhub.services.qr_service import build_qr_payload, render_qr_png

router = APIRouter()


def get_today() -> date:
    """Reference date for lifecycle categorization; overridden in tests"""
    return date.today()


@router.get("/events", response_model=EventListResponse)
async def list_events(
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
):
    """All events, split into ongoing / completed / upcoming"""
    buckets = await event_service.list_categorized(db, today)
    response = {
        name: [serialize_event(event, today) for event in events]
        for name, events in buckets.items()
    }
    response["currentUser"] = current.usn
    return response


@router.post("/events/create", response_model=EventCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreateRequest,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
):
    event = await event_service.create_event(db, data, current.usn, today)
    return EventCreateResponse(
        message="Event created successfully!",
        eventId=event.id,
        organizerUSN=current.usn,
    )


@router.get("/events/{event_id}", response_model=EventDetail)
async def get_event(
    event_id: str,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
):
    """Event details with the caller's registration flags"""
    return await event_service.get_event_detail(db, parse_event_id(event_id), current.usn, today)


@router.get("/events/{event_id}/qr")
async def get_event_qr(
    event_id: str,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    """Attendance QR code (PNG). Organizer only."""
    event = await event_service.get_event(db, parse_event_id(event_id))
    if event.organizer_usn != current.usn:
        raise ForbiddenError("Only the organizer can view this event's QR code")

    png = render_qr_png(build_qr_payload(event.id))
    return Response(content=png, media_type="image/png")


@router.post("/events/{event_id}/join", response_model=MessageResponse)
async def join_event(
    event_id: str,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    await participation_service.join(db, parse_event_id(event_id), current.usn)
    return MessageResponse(message="Successfully joined event!")


@router.post("/events/{event_id}/volunteer", response_model=MessageResponse)
async def volunteer_for_event(
    event_id: str,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    await participation_service.volunteer(db, parse_event_id(event_id), current.usn)
    return MessageResponse(message="Successfully volunteered for event!")


@router.get("/events/{event_id}/participant-count", response_model=CountResponse)
async def participant_count(
    event_id: str,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    return CountResponse(count=await event_service.count_participants(db, parse_event_id(event_id)))


@router.get("/events/{event_id}/volunteer-count", response_model=CountResponse)
async def volunteer_count(
    event_id: str,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    return CountResponse(count=await event_service.count_volunteers(db, parse_event_id(event_id)))


@router.get("/my-participant-events", response_model=ParticipantEventsResponse)
async def my_participant_events(
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
):
    rows = await event_service.list_participating(db, current.usn)
    return {
        "participantEvents": [
            {**serialize_event(event, today), "PartStatus": attended, "PartUSN": current.usn, "role": "participant"}
            for event, attended in rows
        ],
        "userUSN": current.usn,
    }


@router.get("/my-volunteer-events", response_model=VolunteerEventsResponse)
async def my_volunteer_events(
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
):
    rows = await event_service.list_volunteering(db, current.usn)
    return {
        "volunteerEvents": [
            {**serialize_event(event, today), "VolnStatus": attended, "role": "volunteer"}
            for event, attended in rows
        ],
        "userUSN": current.usn,
    }


@router.get("/my-organized-events", response_model=OrganizedEventsResponse)
async def my_organized_events(
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
):
    events = await event_service.list_organized(db, current.usn)
    return {
        "organizerEvents": [
            {**serialize_event(event, today), "role": "organizer"}
            for event in events
        ],
        "userUSN": current.usn,
    }
