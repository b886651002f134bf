# anandayojan/lifecycle.py
"""
Booking lifecycle: creation with a 10% deposit, payment confirmation,
cancellation under the 6-hour rule, operator completion and feedback.

States move ``locked -> confirmed -> completed`` or ``locked|confirmed ->
cancelled``; ``completed`` and ``cancelled`` are terminal. Guard violations
are returned as :class:`~anandayojan.errors.Rejection` values and leave the
stored record untouched. Each mutation checks its guards and writes inside
``store.lock(booking_id)``; emails go out after the lock is released and
never undo a committed change.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, List, Optional, Union
from uuid import uuid4
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from .errors import Rejection, RejectionKind, UpstreamUnavailable
from .models.booking import (
    Booking,
    BookingCreate,
    BookingFeedback,
    BookingStatus,
    CustomerContact,
    PaymentStatus,
    RefundStatus
)
from .models.payment import GatewayOrder
from .services.notifications import Notifier
from .services.razorpay_gateway import PaymentGateway
from .stores import BookingStore

logger = logging.getLogger(__name__)

DEPOSIT_RATE = Decimal("0.10")
CANCELLATION_CUTOFF_HOURS = 6
MS_PER_HOUR = 3_600_000
PAISE_PER_RUPEE = 100

TOO_LATE_TO_CANCEL_MESSAGE = "Cannot cancel - less than 6 hours remaining before scheduled time"
CANCELLED_MESSAGE = "100% refund will be processed within 5-7 business days"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compute_locking_amount(total_amount: int) -> int:
    """10% of the total, rounded half up to whole rupees."""
    deposit = Decimal(total_amount) * DEPOSIT_RATE
    return int(deposit.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def epoch_ms(moment: datetime) -> int:
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def hours_until(scheduled_at: datetime, now: datetime) -> float:
    return (epoch_ms(scheduled_at) - epoch_ms(now)) / MS_PER_HOUR


def can_cancel(scheduled_at: datetime, now: datetime) -> bool:
    return hours_until(scheduled_at, now) >= CANCELLATION_CUTOFF_HOURS


def new_booking_id() -> str:
    return f"BKG{uuid4().hex[:12].upper()}"


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {error.get('msg', 'invalid value')}" if field else error.get("msg", "Invalid input")


@dataclass(frozen=True)
class BookingCreated:
    booking: Booking
    gateway_order: GatewayOrder


@dataclass(frozen=True)
class PaymentConfirmation:
    booking: Booking
    newly_confirmed: bool


class BookingLifecycleManager:
    def __init__(
        self,
        store: BookingStore,
        payments: PaymentGateway,
        notifier: Optional[Notifier] = None,
        clock: Clock = utcnow,
        booking_timezone: str = "Asia/Kolkata",
    ):
        self.store = store
        self.payments = payments
        self.notifier = notifier
        self.clock = clock
        self.tz = ZoneInfo(booking_timezone)

    async def create_booking(
        self,
        request: Union[BookingCreate, dict],
        owner_id: str,
    ) -> Union[BookingCreated, Rejection]:
        """
        Persist a ``locked`` booking and open the deposit order for it.

        The booking is stored before the gateway is called; if the gateway
        fails the booking stays and the rejection names it.
        """
        if not isinstance(request, BookingCreate):
            try:
                request = BookingCreate.model_validate(request)
            except ValidationError as e:
                return Rejection(RejectionKind.VALIDATION_ERROR, _first_error(e))

        scheduled_at = datetime.combine(
            request.preferred_date, request.preferred_time.replace(tzinfo=None), tzinfo=self.tz
        ).astimezone(timezone.utc)

        booking = Booking(
            id=new_booking_id(),
            service_id=request.service_id,
            service_name=request.service_name,
            package_id=request.package_id,
            package_name=request.package_name,
            owner_id=owner_id,
            customer=CustomerContact(name=request.name, email=request.email, phone=request.phone),
            address=request.address,
            city=request.city,
            pincode=request.pincode,
            estimated_guests=request.estimated_guests,
            notes=request.notes,
            preferred_date=request.preferred_date,
            preferred_time=request.preferred_time,
            scheduled_at=scheduled_at,
            total_amount=request.total_amount,
            locking_amount=compute_locking_amount(request.total_amount),
            created_at=self.clock(),
        )
        await self.store.insert(booking)
        logger.info(
            f"Booking {booking.id} created for {booking.service_id}/{booking.package_id}, "
            f"deposit {booking.locking_amount} of {booking.total_amount}"
        )

        try:
            order = await self.payments.create_order(
                booking.locking_amount * PAISE_PER_RUPEE,
                booking.id,
                {"bookingId": booking.id, "type": "booking_lock"},
            )
        except UpstreamUnavailable as e:
            logger.error(f"Deposit order for booking {booking.id} failed: {e}")
            return Rejection(
                RejectionKind.UPSTREAM_UNAVAILABLE,
                "Your booking was saved but the payment could not be started. Please try again shortly.",
                booking_id=booking.id,
            )

        async with self.store.lock(booking.id):
            current = await self.store.get(booking.id)
            booking = current.model_copy(update={"gateway_order_id": order.id})
            await self.store.update(booking)

        return BookingCreated(booking=booking, gateway_order=order)

    async def verify_and_confirm_payment(
        self,
        booking_id: str,
        owner_id: Optional[str],
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
    ) -> Union[PaymentConfirmation, Rejection]:
        async with self.store.lock(booking_id):
            booking = await self._load(booking_id, owner_id)
            if isinstance(booking, Rejection):
                return booking

            try:
                valid = self.payments.verify_signature(gateway_order_id, gateway_payment_id, signature)
            except UpstreamUnavailable as e:
                logger.error(f"Cannot verify payment for booking {booking_id}: {e}")
                return Rejection(RejectionKind.UPSTREAM_UNAVAILABLE, "Payment verification is unavailable")

            if not valid or booking.gateway_order_id != gateway_order_id:
                logger.warning(f"Payment signature rejected for booking {booking_id}")
                return Rejection(RejectionKind.INVALID_SIGNATURE, "Invalid payment signature")

            result = self._confirm(booking, gateway_payment_id)
            if isinstance(result, Rejection):
                return result
            if result.newly_confirmed:
                await self.store.update(result.booking)

        if result.newly_confirmed:
            logger.info(f"Booking {booking_id} confirmed, payment {gateway_payment_id}")
            await self._send_confirmation(result.booking)
        return result

    async def confirm_from_gateway(
        self,
        gateway_order_id: str,
        gateway_payment_id: Optional[str],
    ) -> Optional[Booking]:
        """Confirm the booking behind a gateway order; the caller has checked the webhook signature."""
        found = await self.store.get_by_gateway_order_id(gateway_order_id)
        if found is None:
            return None

        async with self.store.lock(found.id):
            booking = await self.store.get(found.id)
            result = self._confirm(booking, gateway_payment_id)
            if isinstance(result, Rejection):
                logger.warning(f"Ignoring gateway confirmation for booking {booking.id}: {result.message}")
                return booking
            if result.newly_confirmed:
                await self.store.update(result.booking)

        if result.newly_confirmed:
            logger.info(f"Booking {booking.id} confirmed by gateway event")
            await self._send_confirmation(result.booking)
        return result.booking

    async def mark_payment_failed(self, gateway_order_id: str) -> Optional[Booking]:
        found = await self.store.get_by_gateway_order_id(gateway_order_id)
        if found is None:
            return None

        async with self.store.lock(found.id):
            booking = await self.store.get(found.id)
            if booking.status != BookingStatus.LOCKED or booking.payment_status != PaymentStatus.PENDING:
                return booking
            booking = booking.model_copy(update={"payment_status": PaymentStatus.FAILED})
            await self.store.update(booking)

        logger.info(f"Deposit payment failed for booking {booking.id}")
        return booking

    async def cancel_booking(self, booking_id: str, owner_id: str) -> Union[Booking, Rejection]:
        async with self.store.lock(booking_id):
            booking = await self._load(booking_id, owner_id)
            if isinstance(booking, Rejection):
                return booking
            if booking.status not in (BookingStatus.LOCKED, BookingStatus.CONFIRMED):
                return Rejection(
                    RejectionKind.INVALID_STATE,
                    f"Booking is already {booking.status.value} and cannot be cancelled",
                )

            now = self.clock()
            if not can_cancel(booking.scheduled_at, now):
                return Rejection(RejectionKind.TOO_LATE_TO_CANCEL, TOO_LATE_TO_CANCEL_MESSAGE)

            booking = booking.model_copy(update={
                "status": BookingStatus.CANCELLED,
                "cancelled_at": now,
                "refund_status": RefundStatus.PROCESSING,
                "payment_status": PaymentStatus.REFUNDED,
            })
            await self.store.update(booking)

        # Refund settlement happens outside this service
        logger.info(f"Booking {booking_id} cancelled, refund of {booking.locking_amount} flagged")
        return booking

    async def mark_completed(self, booking_id: str) -> Union[Booking, Rejection]:
        async with self.store.lock(booking_id):
            booking = await self._load(booking_id, None)
            if isinstance(booking, Rejection):
                return booking
            if booking.status != BookingStatus.CONFIRMED:
                return Rejection(
                    RejectionKind.INVALID_STATE,
                    f"Only confirmed bookings can be completed (booking is {booking.status.value})",
                )

            booking = booking.model_copy(update={
                "status": BookingStatus.COMPLETED,
                "completed_at": self.clock(),
            })
            await self.store.update(booking)

        logger.info(f"Booking {booking_id} marked complete")
        return booking

    async def submit_feedback(
        self,
        booking_id: str,
        owner_id: str,
        rating: int,
        comments: str = "",
    ) -> Union[Booking, Rejection]:
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            return Rejection(RejectionKind.VALIDATION_ERROR, "Rating must be a whole number from 1 to 5")

        async with self.store.lock(booking_id):
            booking = await self._load(booking_id, owner_id)
            if isinstance(booking, Rejection):
                return booking
            if booking.status != BookingStatus.COMPLETED:
                return Rejection(RejectionKind.INVALID_STATE, "Feedback can only be given for completed bookings")
            if booking.feedback is not None:
                return Rejection(RejectionKind.ALREADY_HAS_FEEDBACK, "Feedback was already submitted for this booking")

            feedback = BookingFeedback(rating=rating, comments=comments or "", created_at=self.clock())
            booking = booking.model_copy(update={"feedback": feedback})
            await self.store.update(booking)

        return booking

    async def get_booking(self, booking_id: str, owner_id: Optional[str]) -> Union[Booking, Rejection]:
        return await self._load(booking_id, owner_id)

    async def list_bookings(self, owner_id: str) -> List[Booking]:
        return await self.store.list_for_owner(owner_id)

    async def list_all_bookings(self) -> List[Booking]:
        return await self.store.list_all()

    async def _load(self, booking_id: str, owner_id: Optional[str]) -> Union[Booking, Rejection]:
        """Fetch a booking; someone else's booking reads as missing."""
        booking = await self.store.get(booking_id)
        if booking is None or (owner_id is not None and booking.owner_id != owner_id):
            return Rejection(RejectionKind.NOT_FOUND, "Booking not found")
        return booking

    def _confirm(
        self,
        booking: Booking,
        gateway_payment_id: Optional[str],
    ) -> Union[PaymentConfirmation, Rejection]:
        if booking.status == BookingStatus.CONFIRMED and booking.payment_status == PaymentStatus.PAID:
            return PaymentConfirmation(booking=booking, newly_confirmed=False)
        if booking.status != BookingStatus.LOCKED:
            return Rejection(
                RejectionKind.INVALID_STATE,
                f"Booking is {booking.status.value} and cannot be confirmed",
            )

        confirmed = booking.model_copy(update={
            "status": BookingStatus.CONFIRMED,
            "payment_status": PaymentStatus.PAID,
            "gateway_payment_id": gateway_payment_id,
        })
        return PaymentConfirmation(booking=confirmed, newly_confirmed=True)

    async def _send_confirmation(self, booking: Booking) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.booking_confirmed(booking)
        except UpstreamUnavailable as e:
            logger.warning(f"Confirmation email for booking {booking.id} not sent: {e}")
