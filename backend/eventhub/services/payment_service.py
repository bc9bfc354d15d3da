"""
RAZORPAY PAYMENT BRIDGE
=======================
Paid event registration.

Flow:
1. Student clicks Register on a paid event → /api/create-order → Razorpay order
2. Frontend opens Razorpay checkout with the order id and key_id
3. Checkout returns payment id + signature → /api/verify-payment
4. Signature checked (HMAC-SHA256 over "order_id|payment_id") → participant row
"""

import asyncio
from datetime import datetime
from decimal import Decimal
from typing import Optional, Dict, Any

import razorpay
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from eventhub.core.config import settings
from eventhub.core.exceptions import (
    ValidationError,
    EventNotFoundError,
    InvalidSignatureError,
    ExternalServiceError,
    StorageError,
)
from eventhub.core.logging_config import logger
from eventhub.core.security import verify_payment_signature
from eventhub.models.event import Event
from eventhub.models.payment import EventPayment, PaymentStatus
from eventhub.services.participation_service import participation_service
from eventhub.utils.formatting import to_minor_units

RECEIPT_MAX_LENGTH = 40


class PaymentGateway:
    """Thin async wrapper over the (synchronous) Razorpay SDK"""

    def __init__(self, key_id: str, key_secret: str):
        self.key_id = key_id
        self.key_secret = key_secret
        self._client: Optional[razorpay.Client] = None

    @property
    def client(self) -> razorpay.Client:
        if self._client is None:
            self._client = razorpay.Client(auth=(self.key_id, self.key_secret))
        return self._client

    @property
    def configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    async def create_order(self, amount: int, currency: str, receipt: str, notes: Dict[str, Any]) -> Dict[str, Any]:
        order_data = {
            "amount": amount,  # Amount in paise
            "currency": currency,
            "receipt": receipt,
            "notes": notes,
        }
        return await asyncio.to_thread(self.client.order.create, data=order_data)

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return verify_payment_signature(order_id, payment_id, signature, self.key_secret)


_gateway: Optional[PaymentGateway] = None


def get_payment_gateway() -> PaymentGateway:
    """FastAPI dependency; tests override it with a fake gateway"""
    global _gateway
    if _gateway is None:
        _gateway = PaymentGateway(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
    return _gateway


def build_receipt(usn: str, event_id: int, now: Optional[datetime] = None) -> str:
    """<usn>_<eventId>_<unix-ts>, capped at Razorpay's 40 characters"""
    ts = int((now or datetime.utcnow()).timestamp())
    return f"{usn}_{event_id}_{ts}"[:RECEIPT_MAX_LENGTH]


class PaymentService:

    def __init__(self, gateway: PaymentGateway):
        self.gateway = gateway

    async def create_order(self, db: AsyncSession, event_id: int, usn: str) -> Dict[str, Any]:
        """
        Create a Razorpay order for the event's registration fee.

        Returns {"order": <razorpay order>, "key_id": <public key>}.
        """
        event = await db.get(Event, event_id)
        if event is None:
            raise EventNotFoundError(event_id)

        fee = Decimal(str(event.registration_fee or 0))
        if fee <= 0:
            raise ValidationError("This event does not require payment", field="eventId")

        amount = to_minor_units(fee)
        receipt = build_receipt(usn, event_id)
        currency = settings.PAYMENT_CURRENCY

        try:
            order = await self.gateway.create_order(
                amount=amount,
                currency=currency,
                receipt=receipt,
                notes={"usn": usn, "event_id": str(event_id)},
            )
        except Exception as e:
            logger.error(f"[Payment] Order creation failed for event {event_id}: {e}")
            raise ExternalServiceError("razorpay", "Failed to create payment order")

        db.add(EventPayment(
            order_id=order["id"],
            event_id=event_id,
            student_usn=usn,
            amount=amount,
            currency=currency,
            receipt=receipt,
            status=PaymentStatus.CREATED.value,
        ))
        await db.commit()

        logger.log_payment_event("order_created", order["id"], amount=amount, event_id=event_id)
        return {"order": order, "key_id": self.gateway.key_id}

    async def verify_payment(
        self,
        db: AsyncSession,
        usn: str,
        payment_id: Optional[str],
        order_id: Optional[str],
        signature: Optional[str],
        event_id: Optional[int],
    ) -> bool:
        """
        Verify the checkout signature, then register the student.

        Returns True if a participant row was created, False if the student
        was already registered. A bad signature changes nothing.
        """
        if not (payment_id and order_id and signature and event_id):
            raise ValidationError("Missing payment verification fields")

        if not self.gateway.verify_signature(order_id, payment_id, signature):
            logger.log_payment_event("signature_mismatch", order_id, success=False, event_id=event_id)
            raise InvalidSignatureError()

        # The signed order must be one issued to this student for this event
        result = await db.execute(select(EventPayment).where(EventPayment.order_id == order_id))
        payment = result.scalar_one_or_none()
        if payment is None or payment.event_id != event_id or payment.student_usn != usn:
            logger.log_payment_event("order_mismatch", order_id, success=False, event_id=event_id)
            raise ValidationError("Payment order does not match this event", field="orderId")

        try:
            created = await participation_service.register_paid_participant(db, event_id, usn)

            await db.execute(
                update(EventPayment)
                .where(EventPayment.order_id == order_id, EventPayment.status != PaymentStatus.PAID.value)
                .values(status=PaymentStatus.PAID.value, payment_id=payment_id, paid_at=datetime.utcnow())
            )

            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"[Payment] Verified payment {payment_id} could not be recorded: {e}")
            raise StorageError()

        logger.log_payment_event("verified", order_id, payment_id=payment_id, event_id=event_id)
        return created
