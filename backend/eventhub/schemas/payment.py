from pydantic import BaseModel
from typing import Optional, Union, Dict, Any


class CreateOrderRequest(BaseModel):
    eventId: Optional[Union[int, str]] = None


class CreateOrderResponse(BaseModel):
    order: Dict[str, Any]
    key_id: str


class VerifyPaymentRequest(BaseModel):
    paymentId: Optional[str] = None
    orderId: Optional[str] = None
    signature: Optional[str] = None
    eventId: Optional[Union[int, str]] = None
