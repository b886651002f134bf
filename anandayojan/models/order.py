# anandayojan/models/order.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .common import CamelModel
from .payment import GatewayOrder

class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"

class OrderPaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"

class CartItem(CamelModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)
    quantity: int = Field(..., ge=1)

class OrderCreate(CamelModel):
    cart_items: List[CartItem] = Field(..., min_length=1)
    total_amount: int = Field(..., gt=0)
    shipping: int = Field(0, ge=0)
    address: str = Field(..., min_length=5)

class Order(CamelModel):
    id: str
    owner_id: str
    customer_name: str
    customer_email: str
    items: List[CartItem]
    total_amount: int
    shipping: int = 0
    address: str
    status: OrderStatus = OrderStatus.PENDING
    payment_status: OrderPaymentStatus = OrderPaymentStatus.PENDING
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    created_at: datetime

class OrderCreateResponse(CamelModel):
    order_id: str
    order: Order
    razorpay_order: GatewayOrder

class OrderList(CamelModel):
    orders: List[Order]
