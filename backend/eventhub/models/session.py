from sqlalchemy import Column, String, DateTime, ForeignKey
from datetime import datetime

from eventhub.core.database import Base


class UserSession(Base):
    """Server-side session row backing the sessionId cookie"""
    __tablename__ = "user_sessions"

    token = Column(String(64), primary_key=True)
    student_usn = Column(String(10), ForeignKey("students.usn", ondelete="CASCADE"), nullable=False, index=True)
    student_name = Column(String(255), nullable=False)
    student_email = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    def is_expired(self, now: datetime = None) -> bool:
        """Check if session is expired"""
        return (now or datetime.utcnow()) >= self.expires_at

    def __repr__(self):
        return f"<UserSession {self.student_usn} expires={self.expires_at}>"
