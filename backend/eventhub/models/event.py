from sqlalchemy import Column, String, Integer, Text, Date, Time, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from eventhub.core.database import Base


class Event(Base):
    """
    Event organized by a student, optionally on behalf of a club.

    Rows are immutable after creation. Lifecycle (upcoming / ongoing /
    completed) is derived from event_date at read time, see
    eventhub.services.event_service.event_status.
    """
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    event_date = Column(Date, nullable=False, index=True)
    event_time = Column(Time, nullable=False)
    location = Column(String(255), nullable=False)

    # 0 or NULL means unlimited
    max_participants = Column(Integer, nullable=True)
    max_volunteers = Column(Integer, nullable=True)

    registration_fee = Column(Numeric(10, 2), default=0, nullable=False)

    organizer_usn = Column(String(10), ForeignKey("students.usn"), nullable=False, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    organizer = relationship("Student", back_populates="organized_events")
    club = relationship("Club", back_populates="events")

    def __repr__(self):
        return f"<Event {self.id} {self.name} on {self.event_date}>"
