from sqlalchemy import Column, String, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship

from eventhub.core.database import Base


class Club(Base):
    """Student club - static reference data"""
    __tablename__ = "clubs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    max_members = Column(Integer, nullable=True)

    memberships = relationship("Membership", back_populates="club", cascade="all, delete-orphan")
    events = relationship("Event", back_populates="club")

    def __repr__(self):
        return f"<Club {self.id} {self.name}>"


class Membership(Base):
    """Student belongs to club"""
    __tablename__ = "club_memberships"

    student_usn = Column(String(10), ForeignKey("students.usn", ondelete="CASCADE"), primary_key=True)
    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), primary_key=True)

    student = relationship("Student", back_populates="memberships")
    club = relationship("Club", back_populates="memberships")

    def __repr__(self):
        return f"<Membership {self.student_usn} -> {self.club_id}>"
