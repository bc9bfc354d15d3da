from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime

from eventhub.core.database import Base


class Participant(Base):
    """Student registered to attend an event"""
    __tablename__ = "participants"
    __table_args__ = (
        UniqueConstraint("student_usn", "event_id", name="uq_participant_student_event"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_usn = Column(String(10), ForeignKey("students.usn", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    attended = Column(Boolean, default=False, nullable=False)
    registered_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Participant {self.student_usn} @ {self.event_id}>"


class Volunteer(Base):
    """Student registered to help run an event"""
    __tablename__ = "volunteers"
    __table_args__ = (
        UniqueConstraint("student_usn", "event_id", name="uq_volunteer_student_event"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_usn = Column(String(10), ForeignKey("students.usn", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    attended = Column(Boolean, default=False, nullable=False)
    registered_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Volunteer {self.student_usn} @ {self.event_id}>"
