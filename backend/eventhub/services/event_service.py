"""
Event Service - event registry

Handles:
- Event creation (future date, club membership check)
- Listing, categorized by lifecycle status
- Per-student views (organized / participating / volunteering)
- Participant and volunteer counts

Lifecycle status is never stored; it is derived from the event date and a
reference "today" each time an event is read.
"""

import enum
from datetime import date, time, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, List, Dict, Any, Iterable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from eventhub.core.exceptions import (
    ValidationError,
    ForbiddenError,
    EventNotFoundError,
)
from eventhub.core.logging_config import logger
from eventhub.models.club import Membership
from eventhub.models.event import Event
from eventhub.models.participation import Participant, Volunteer
from eventhub.schemas.event import EventCreateRequest
from eventhub.utils.formatting import format_date, format_time, format_fee

# Upper bound of the INTEGER primary key column
MAX_EVENT_ID = 2 ** 31 - 1


class EventStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


def event_status(event_date: date, today: Optional[date] = None) -> EventStatus:
    """Same day is ongoing, earlier is completed, later is upcoming"""
    today = today or date.today()
    if event_date == today:
        return EventStatus.ONGOING
    if event_date < today:
        return EventStatus.COMPLETED
    return EventStatus.UPCOMING


def categorize_events(events: Iterable[Event], today: Optional[date] = None) -> Dict[str, List[Event]]:
    today = today or date.today()
    buckets: Dict[str, List[Event]] = {status.value: [] for status in
                                       (EventStatus.ONGOING, EventStatus.COMPLETED, EventStatus.UPCOMING)}
    for event in events:
        buckets[event_status(event.event_date, today).value].append(event)
    return buckets


def parse_event_id(raw: Any) -> int:
    """Path/body event ids arrive as strings; anything non-numeric is a 400"""
    try:
        event_id = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError("Invalid event ID", field="eventId")
    if event_id <= 0 or event_id > MAX_EVENT_ID:
        raise ValidationError("Invalid event ID", field="eventId")
    return event_id


def serialize_event(event: Event, today: Optional[date] = None) -> Dict[str, Any]:
    """Event row to the JSON shape used by every event endpoint"""
    fee = event.registration_fee or 0
    return {
        "eid": event.id,
        "ename": event.name,
        "eventdesc": event.description,
        "eventDate": event.event_date.isoformat(),
        "eventTime": event.event_time.strftime("%H:%M:%S"),
        "eventLoc": event.location,
        "maxPart": event.max_participants,
        "maxVoln": event.max_volunteers,
        "regFee": float(fee),
        "clubId": event.club_id,
        "clubName": event.club.name if event.club else None,
        "organizerName": event.organizer.name if event.organizer else None,
        "OrgUsn": event.organizer_usn,
        "status": event_status(event.event_date, today).value,
        "displayDate": format_date(event.event_date),
        "displayTime": format_time(event.event_time),
        "feeLabel": format_fee(fee),
    }


def _optional_non_negative_int(value: Any, field: str, label: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number", field=field)
    if number < 0:
        raise ValidationError(f"{label} cannot be negative", field=field)
    return number or None


class EventService:
    """Service for creating and reading events"""

    def _event_query(self):
        return select(Event).options(
            selectinload(Event.club),
            selectinload(Event.organizer),
        )

    async def create_event(
        self,
        db: AsyncSession,
        data: EventCreateRequest,
        organizer_usn: str,
        today: Optional[date] = None,
    ) -> Event:
        """
        Create an event organized by ``organizer_usn``.

        Raises:
            ValidationError: missing fields, date not in the future, bad numbers
            ForbiddenError: club given but organizer is not a member
        """
        today = today or date.today()

        name = (data.name or "").strip()
        description = (data.description or "").strip()
        location = (data.location or "").strip()
        if not (name and description and data.event_date and data.event_time and location):
            raise ValidationError("Event name, description, date, time, and location are required")

        try:
            event_date = date.fromisoformat(data.event_date.strip()[:10])
        except ValueError:
            raise ValidationError("Invalid event date", field="eventDate")
        try:
            event_time = time.fromisoformat(data.event_time.strip())
        except ValueError:
            raise ValidationError("Invalid event time", field="eventTime")

        if event_date <= today:
            raise ValidationError("Event date must be in the future", field="eventDate")

        max_participants = _optional_non_negative_int(
            data.max_participants, "maxParticipants", "Max participants"
        )
        max_volunteers = _optional_non_negative_int(
            data.max_volunteers, "maxVolunteers", "Max volunteers"
        )

        fee = Decimal("0")
        if data.registration_fee not in (None, ""):
            try:
                fee = Decimal(str(data.registration_fee))
            except InvalidOperation:
                raise ValidationError("Registration fee must be a number", field="registrationFee")
            if not fee.is_finite():
                raise ValidationError("Registration fee must be a number", field="registrationFee")
            if fee < 0:
                raise ValidationError("Registration fee cannot be negative", field="registrationFee")

        club_id = None
        if data.club_id not in (None, "", 0, "0"):
            try:
                club_id = int(data.club_id)
            except (TypeError, ValueError):
                raise ValidationError("Invalid club ID", field="clubId")
            if not 0 < club_id <= MAX_EVENT_ID:
                raise ValidationError("Invalid club ID", field="clubId")

            membership = await db.execute(
                select(Membership).where(
                    Membership.student_usn == organizer_usn,
                    Membership.club_id == club_id,
                )
            )
            if membership.scalar_one_or_none() is None:
                raise ForbiddenError("You must be a member of the club to organize events for it")

        event = Event(
            name=name,
            description=description,
            event_date=event_date,
            event_time=event_time,
            location=location,
            max_participants=max_participants,
            max_volunteers=max_volunteers,
            registration_fee=fee,
            organizer_usn=organizer_usn,
            club_id=club_id,
            created_at=datetime.utcnow(),
        )
        db.add(event)
        await db.commit()
        await db.refresh(event)

        logger.info(f"Event {event.id} created by {organizer_usn}", extra={
            "event_type": "event_created",
            "event_id": event.id,
            "club_id": club_id,
        })
        return event

    async def get_event(self, db: AsyncSession, event_id: int) -> Event:
        result = await db.execute(self._event_query().where(Event.id == event_id))
        event = result.scalar_one_or_none()
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def list_events(self, db: AsyncSession) -> List[Event]:
        result = await db.execute(self._event_query().order_by(Event.event_date, Event.event_time))
        return list(result.scalars().all())

    async def list_categorized(self, db: AsyncSession, today: Optional[date] = None) -> Dict[str, List[Event]]:
        return categorize_events(await self.list_events(db), today)

    async def get_event_detail(
        self,
        db: AsyncSession,
        event_id: int,
        usn: str,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        """Event plus the caller's isRegistered / isVolunteer / isOrganizer flags"""
        event = await self.get_event(db, event_id)

        is_registered = await db.scalar(
            select(func.count()).select_from(Participant).where(
                Participant.event_id == event_id, Participant.student_usn == usn
            )
        )
        is_volunteer = await db.scalar(
            select(func.count()).select_from(Volunteer).where(
                Volunteer.event_id == event_id, Volunteer.student_usn == usn
            )
        )

        detail = serialize_event(event, today)
        detail["isRegistered"] = bool(is_registered)
        detail["isVolunteer"] = bool(is_volunteer)
        detail["isOrganizer"] = event.organizer_usn == usn
        return detail

    async def list_organized(self, db: AsyncSession, usn: str) -> List[Event]:
        result = await db.execute(
            self._event_query().where(Event.organizer_usn == usn).order_by(Event.event_date)
        )
        return list(result.scalars().all())

    async def list_participating(self, db: AsyncSession, usn: str) -> List[tuple]:
        """(event, attended) pairs for the student's participant registrations"""
        result = await db.execute(
            self._event_query()
            .add_columns(Participant.attended)
            .join(Participant, Participant.event_id == Event.id)
            .where(Participant.student_usn == usn)
            .order_by(Event.event_date)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def list_volunteering(self, db: AsyncSession, usn: str) -> List[tuple]:
        """(event, attended) pairs for the student's volunteer registrations"""
        result = await db.execute(
            self._event_query()
            .add_columns(Volunteer.attended)
            .join(Volunteer, Volunteer.event_id == Event.id)
            .where(Volunteer.student_usn == usn)
            .order_by(Event.event_date)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def count_participants(self, db: AsyncSession, event_id: int) -> int:
        count = await db.scalar(
            select(func.count()).select_from(Participant).where(Participant.event_id == event_id)
        )
        return count or 0

    async def count_volunteers(self, db: AsyncSession, event_id: int) -> int:
        count = await db.scalar(
            select(func.count()).select_from(Volunteer).where(Volunteer.event_id == event_id)
        )
        return count or 0


event_service = EventService()
