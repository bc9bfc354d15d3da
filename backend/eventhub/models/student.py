from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime

from eventhub.core.database import Base


class Student(Base):
    """Student account, keyed by USN"""
    __tablename__ = "students"

    usn = Column(String(10), primary_key=True)
    name = Column(String(255), nullable=False)
    semester = Column(Integer, nullable=False)
    mobile = Column(String(10), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Password reset fields (only the SHA-256 digest of the token is stored)
    reset_token_hash = Column(String(64), nullable=True, index=True)
    reset_token_expires = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    memberships = relationship("Membership", back_populates="student", cascade="all, delete-orphan")
    organized_events = relationship("Event", back_populates="organizer")

    def __repr__(self):
        return f"<Student {self.usn}>"
