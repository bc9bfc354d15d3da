from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from datetime import datetime
import enum

from eventhub.core.database import Base


class PaymentStatus(str, enum.Enum):
    CREATED = "created"
    PAID = "paid"


class EventPayment(Base):
    """
    Razorpay order raised for an event registration fee.

    Audit trail only - registration is decided by signature verification,
    never by reading this table.
    """
    __tablename__ = "event_payments"

    order_id = Column(String(64), primary_key=True)  # Razorpay order id (order_xxx)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    student_usn = Column(String(10), ForeignKey("students.usn", ondelete="CASCADE"), nullable=False, index=True)

    amount = Column(Integer, nullable=False)  # paise
    currency = Column(String(3), default="INR", nullable=False)
    receipt = Column(String(40), nullable=False)
    status = Column(String(20), default=PaymentStatus.CREATED.value, nullable=False)
    payment_id = Column(String(64), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    paid_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<EventPayment {self.order_id} {self.status}>"
