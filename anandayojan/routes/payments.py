# anandayojan/routes/payments.py
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from ..dependencies import get_booking_manager, get_order_manager
from ..errors import Rejection, rejection_to_http
from ..lifecycle import BookingLifecycleManager
from ..models.payment import PaymentVerify, PaymentVerifyResponse, WebhookAck
from ..orders import OrderManager
from ..services import PaymentGateway, get_payment_gateway
from ..utils.auth import get_current_user

logger = logging.getLogger(__name__)

payments_router = APIRouter(prefix="/payments", tags=["Payments"])

CONFIRMING_EVENTS = ("payment.captured", "order.paid")


@payments_router.post(
    "/verify",
    response_model=PaymentVerifyResponse,
    response_model_exclude_none=True
)
async def verify_payment(
    payment: PaymentVerify,
    current_user: dict = Depends(get_current_user),
    bookings: BookingLifecycleManager = Depends(get_booking_manager),
    orders: OrderManager = Depends(get_order_manager)
):
    if payment.booking_id:
        result = await bookings.verify_and_confirm_payment(
            payment.booking_id,
            current_user["id"],
            payment.razorpay_order_id,
            payment.razorpay_payment_id,
            payment.razorpay_signature
        )
        if isinstance(result, Rejection):
            raise rejection_to_http(result)
        return PaymentVerifyResponse(
            success=True,
            message="Booking payment verified",
            booking_id=result.booking.id
        )

    if payment.order_id:
        result = await orders.verify_and_confirm_payment(
            payment.order_id,
            current_user["id"],
            payment.razorpay_order_id,
            payment.razorpay_payment_id,
            payment.razorpay_signature
        )
        if isinstance(result, Rejection):
            raise rejection_to_http(result)
        return PaymentVerifyResponse(
            success=True,
            message="Order payment verified",
            order_id=result.id
        )

    raise HTTPException(status_code=400, detail="Missing bookingId or orderId")


def _object(value) -> dict:
    return value if isinstance(value, dict) else {}


def _text(value) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _gateway_ids(event: dict):
    """Pull the gateway order id and payment id out of a webhook payload.

    Any level of the payload with an unexpected shape counts as absent.
    """
    payload = _object(event.get("payload"))
    payment = _object(_object(payload.get("payment")).get("entity"))
    order = _object(_object(payload.get("order")).get("entity"))
    return _text(payment.get("order_id")) or _text(order.get("id")), _text(payment.get("id"))


@payments_router.post("/webhook", response_model=WebhookAck)
async def payment_webhook(
    request: Request,
    x_razorpay_signature: Optional[str] = Header(None, alias="x-razorpay-signature"),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    bookings: BookingLifecycleManager = Depends(get_booking_manager),
    orders: OrderManager = Depends(get_order_manager)
):
    body = await request.body()
    if not gateway.verify_webhook_signature(body, x_razorpay_signature):
        logger.warning("Rejected webhook with an invalid signature")
        raise HTTPException(status_code=400, detail="Invalid webhook signature")

    try:
        event = json.loads(body)
    except ValueError:
        event = None
    if not isinstance(event, dict):
        raise HTTPException(status_code=400, detail="Malformed webhook payload")

    event_type = event.get("event", "")
    gateway_order_id, gateway_payment_id = _gateway_ids(event)
    logger.info(f"Webhook {event_type} for gateway order {gateway_order_id}")

    if not gateway_order_id:
        return WebhookAck()

    if event_type in CONFIRMING_EVENTS:
        booking = await bookings.confirm_from_gateway(gateway_order_id, gateway_payment_id)
        if booking is None:
            order = await orders.confirm_from_gateway(gateway_order_id, gateway_payment_id)
            if order is None:
                logger.warning(f"Webhook {event_type} names unknown gateway order {gateway_order_id}")
    elif event_type == "payment.failed":
        await bookings.mark_payment_failed(gateway_order_id)
    else:
        logger.info(f"Ignoring webhook event {event_type}")

    return WebhookAck()
