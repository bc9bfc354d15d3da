"""
Paid event registration via Razorpay.

1. /api/create-order   → Razorpay order for the event fee
2. Razorpay checkout on the frontend
3. /api/verify-payment → signature check, then participant registration
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.database import get_db
from eventhub.core.exceptions import ValidationError
from eventhub.core.session_store import SessionData
from eventhub.modules.auth.dependencies import get_current_session
from eventhub.schemas.auth import MessageResponse
from eventhub.schemas.payment import CreateOrderRequest, CreateOrderResponse, VerifyPaymentRequest
from eventhub.services.event_service import parse_event_id
from eventhub.services.payment_service import PaymentGateway, PaymentService, get_payment_gateway

router = APIRouter()


@router.post("/create-order", response_model=CreateOrderResponse)
async def create_order(
    body: CreateOrderRequest,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    if body.eventId in (None, ""):
        raise ValidationError("Event ID is required", field="eventId")

    service = PaymentService(gateway)
    return await service.create_order(db, parse_event_id(body.eventId), current.usn)


@router.post("/verify-payment", response_model=MessageResponse)
async def verify_payment(
    body: VerifyPaymentRequest,
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Verify checkout signature and register the caller as participant"""
    event_id = parse_event_id(body.eventId) if body.eventId not in (None, "") else None

    service = PaymentService(gateway)
    created = await service.verify_payment(
        db,
        usn=current.usn,
        payment_id=body.paymentId,
        order_id=body.orderId,
        signature=body.signature,
        event_id=event_id,
    )

    if created:
        message = "Payment verified and registered successfully!"
    else:
        message = "Payment verified. Already registered for this event."
    return MessageResponse(message=message)
