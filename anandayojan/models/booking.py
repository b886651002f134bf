# anandayojan/models/booking.py
from pydantic import EmailStr, Field, field_serializer
from datetime import date, datetime, time
from typing import List, Optional
from enum import Enum

from .common import CamelModel
from .payment import GatewayOrder

class BookingStatus(str, Enum):
    LOCKED = "locked"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"

class RefundStatus(str, Enum):
    NONE = "none"
    PROCESSING = "processing"
    COMPLETED = "completed"

class CustomerContact(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=20)

class BookingFeedback(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comments: str = ""
    created_at: datetime

class BookingCreate(CamelModel):
    service_id: str = Field(..., min_length=1)
    service_name: str = Field(..., min_length=1)
    package_id: str = Field(..., min_length=1)
    package_name: str = Field(..., min_length=1)
    name: str = Field(..., min_length=2)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=20)
    address: Optional[str] = None
    city: str = Field(..., min_length=2)
    pincode: str = Field(..., pattern=r"^\d{6}$")
    preferred_date: date
    preferred_time: time
    estimated_guests: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = Field(None, max_length=2000)
    total_amount: int = Field(..., gt=0, description="Whole rupees")

class Booking(CamelModel):
    id: str
    service_id: str
    service_name: str
    package_id: str
    package_name: str
    owner_id: str
    customer: CustomerContact
    address: Optional[str] = None
    city: str
    pincode: str
    estimated_guests: Optional[int] = None
    notes: Optional[str] = None
    preferred_date: date
    preferred_time: time
    scheduled_at: datetime
    total_amount: int
    locking_amount: int
    status: BookingStatus = BookingStatus.LOCKED
    payment_status: PaymentStatus = PaymentStatus.PENDING
    refund_status: RefundStatus = RefundStatus.NONE
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    feedback: Optional[BookingFeedback] = None
    created_at: datetime
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @field_serializer("preferred_time")
    def serialize_preferred_time(self, value: time) -> str:
        return value.strftime("%H:%M")

class FeedbackCreate(CamelModel):
    rating: int = Field(..., ge=1, le=5, description="Rating between 1 and 5")
    comments: str = Field("", max_length=2000)

class BookingCreateResponse(CamelModel):
    booking_id: str
    booking: Booking
    razorpay_order: GatewayOrder

class BookingOut(CamelModel):
    booking: Booking

class BookingList(CamelModel):
    bookings: List[Booking]

class BookingCancelResponse(CamelModel):
    success: bool
    message: str
    booking: Booking

class BookingActionResponse(CamelModel):
    success: bool
    booking: Booking
