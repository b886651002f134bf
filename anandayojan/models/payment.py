# anandayojan/models/payment.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .common import CamelModel

class GatewayOrder(CamelModel):
    id: str
    amount: int = Field(..., description="Smallest currency unit (paise)")
    currency: str = "INR"
    receipt: Optional[str] = Field(None, exclude=True)

class PaymentVerify(BaseModel):
    # The gateway callback fields keep Razorpay's snake_case names
    model_config = ConfigDict(populate_by_name=True)

    booking_id: Optional[str] = Field(None, alias="bookingId")
    order_id: Optional[str] = Field(None, alias="orderId")
    razorpay_payment_id: str
    razorpay_order_id: str
    razorpay_signature: str

class PaymentVerifyResponse(CamelModel):
    success: bool
    message: str
    booking_id: Optional[str] = None
    order_id: Optional[str] = None

class WebhookAck(BaseModel):
    status: str = "ok"
