"""
Participation Service - the participant / volunteer ledger

Handles:
- Joining an event as participant or volunteer, with capacity limits
- Registering a participant after a verified payment
- Attendance marking through a single AttendanceMarker

Capacity is enforced by one conditional INSERT ... SELECT ... WHERE
(count) < max statement, so the check and the insert share a round trip.
On databases running below serializable isolation two concurrent joins at
the boundary can still both succeed; the unique (student, event) constraint
only guards against duplicates.
"""

from datetime import datetime
from typing import Optional, Dict, Tuple, Type

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, insert, update, func, literal, String, Integer, Boolean, DateTime
from sqlalchemy.exc import IntegrityError

from eventhub.core.exceptions import (
    AlreadyRegisteredError,
    CapacityExceededError,
    EventNotFoundError,
    ForbiddenError,
    RegistrationNotFoundError,
    AlreadyMarkedError,
    ValidationError,
)
from eventhub.core.logging_config import logger
from eventhub.models.event import Event
from eventhub.models.participation import Participant, Volunteer

PARTICIPANT = "participant"
VOLUNTEER = "volunteer"

ROLE_MODELS: Dict[str, Tuple[Type, object]] = {
    PARTICIPANT: (Participant, Event.max_participants),
    VOLUNTEER: (Volunteer, Event.max_volunteers),
}


def _role_model(role: str):
    try:
        return ROLE_MODELS[role]
    except KeyError:
        raise ValidationError(f"Unknown role '{role}'", field="role")


class ParticipationService:
    """Join / volunteer with capacity enforcement"""

    async def is_registered(self, db: AsyncSession, role: str, event_id: int, usn: str) -> bool:
        model, _ = _role_model(role)
        count = await db.scalar(
            select(func.count()).select_from(model).where(
                model.event_id == event_id, model.student_usn == usn
            )
        )
        return bool(count)

    async def register(self, db: AsyncSession, role: str, event_id: int, usn: str) -> None:
        """
        Add ``usn`` to the event's participant or volunteer list.

        Checks run in this order: already registered, event exists, capacity.
        """
        model, max_column = _role_model(role)

        if await self.is_registered(db, role, event_id, usn):
            raise AlreadyRegisteredError(role)

        result = await db.execute(select(max_column).where(Event.id == event_id))
        row = result.first()
        if row is None:
            raise EventNotFoundError(event_id)
        limit = row[0] or 0

        now = datetime.utcnow()
        if limit > 0:
            current = (
                select(func.count())
                .select_from(model)
                .where(model.event_id == event_id)
                .correlate(None)
                .scalar_subquery()
            )
            stmt = insert(model).from_select(
                ["student_usn", "event_id", "attended", "registered_at"],
                select(
                    literal(usn, String),
                    literal(event_id, Integer),
                    literal(False, Boolean),
                    literal(now, DateTime),
                ).where(current < limit),
            )
        else:
            stmt = insert(model).values(
                student_usn=usn, event_id=event_id, attended=False, registered_at=now
            )

        try:
            result = await db.execute(stmt)
            if result.rowcount == 0:
                await db.rollback()
                raise CapacityExceededError(role)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise AlreadyRegisteredError(role)

        logger.info(f"{usn} registered as {role} for event {event_id}", extra={
            "event_type": "registration",
            "registration_role": role,
            "event_id": event_id,
        })

    async def join(self, db: AsyncSession, event_id: int, usn: str) -> None:
        await self.register(db, PARTICIPANT, event_id, usn)

    async def volunteer(self, db: AsyncSession, event_id: int, usn: str) -> None:
        await self.register(db, VOLUNTEER, event_id, usn)

    async def register_paid_participant(self, db: AsyncSession, event_id: int, usn: str) -> bool:
        """
        Register after a verified payment. No capacity check - the fee has
        already been captured. Returns False when the student was already
        registered.
        """
        exists = await db.scalar(select(func.count()).select_from(Event).where(Event.id == event_id))
        if not exists:
            raise EventNotFoundError(event_id)

        if await self.is_registered(db, PARTICIPANT, event_id, usn):
            return False

        db.add(Participant(
            student_usn=usn,
            event_id=event_id,
            attended=False,
            registered_at=datetime.utcnow(),
        ))
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            return False
        return True


class AttendanceMarker:
    """
    Flips a registration's attended flag from false to true, once.

    Two call conventions:
    - mark_own: identity comes from the session; the acting student may only
      mark their own attendance
    - mark_explicit: identity supplied by the caller (legacy scan-qr route)
    """

    async def mark_own(
        self,
        db: AsyncSession,
        role: str,
        event_id: int,
        usn: str,
        acting_usn: str,
    ) -> None:
        if not usn or usn != acting_usn:
            raise ForbiddenError("You can only mark your own attendance")
        await self._mark(db, role, event_id, usn, via="session")

    async def mark_explicit(self, db: AsyncSession, role: str, event_id: int, usn: str) -> None:
        await self._mark(db, role, event_id, usn, via="legacy")

    async def _mark(self, db: AsyncSession, role: str, event_id: int, usn: str, via: str) -> None:
        model, _ = _role_model(role)

        result = await db.execute(
            update(model)
            .where(
                model.event_id == event_id,
                model.student_usn == usn,
                model.attended.is_(False),
            )
            .values(attended=True)
        )
        if result.rowcount == 0:
            await db.rollback()
            existing = await db.execute(
                select(model.attended).where(model.event_id == event_id, model.student_usn == usn)
            )
            if existing.first() is None:
                raise RegistrationNotFoundError(role, usn, event_id)
            raise AlreadyMarkedError(role)

        await db.commit()
        logger.log_attendance_event(role, usn, event_id, via)


participation_service = ParticipationService()
attendance_marker = AttendanceMarker()
