# anandayojan/routes/bookings.py
from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_booking_manager
from ..errors import Rejection, RejectionKind, rejection_to_http
from ..lifecycle import CANCELLED_MESSAGE, BookingLifecycleManager
from ..models.booking import (
    BookingActionResponse,
    BookingCancelResponse,
    BookingCreate,
    BookingCreateResponse,
    BookingList,
    BookingOut,
    FeedbackCreate
)
from ..utils.auth import get_current_user, require_admin

bookings_router = APIRouter(prefix="/bookings", tags=["Bookings"])


@bookings_router.post("", response_model=BookingCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking: BookingCreate,
    current_user: dict = Depends(get_current_user),
    manager: BookingLifecycleManager = Depends(get_booking_manager)
):
    result = await manager.create_booking(booking, current_user["id"])
    if isinstance(result, Rejection):
        raise rejection_to_http(result)

    return BookingCreateResponse(
        booking_id=result.booking.id,
        booking=result.booking,
        razorpay_order=result.gateway_order
    )


@bookings_router.get("", response_model=BookingList)
async def list_my_bookings(
    current_user: dict = Depends(get_current_user),
    manager: BookingLifecycleManager = Depends(get_booking_manager)
):
    return BookingList(bookings=await manager.list_bookings(current_user["id"]))


@bookings_router.get("/{booking_id}", response_model=BookingOut)
async def get_booking(
    booking_id: str,
    current_user: dict = Depends(get_current_user),
    manager: BookingLifecycleManager = Depends(get_booking_manager)
):
    # Admins can open any booking
    owner_id = None if current_user["type"] == "admin" else current_user["id"]
    result = await manager.get_booking(booking_id, owner_id)
    if isinstance(result, Rejection):
        raise rejection_to_http(result)
    return BookingOut(booking=result)


@bookings_router.post("/{booking_id}/cancel", response_model=BookingCancelResponse)
async def cancel_booking(
    booking_id: str,
    current_user: dict = Depends(get_current_user),
    manager: BookingLifecycleManager = Depends(get_booking_manager)
):
    result = await manager.cancel_booking(booking_id, current_user["id"])
    if isinstance(result, Rejection):
        if result.kind == RejectionKind.INVALID_STATE:
            # Cancel answers 400 for any state it cannot leave
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
        raise rejection_to_http(result)
    return BookingCancelResponse(success=True, message=CANCELLED_MESSAGE, booking=result)


@bookings_router.post("/{booking_id}/feedback", response_model=BookingActionResponse)
async def submit_feedback(
    booking_id: str,
    feedback: FeedbackCreate,
    current_user: dict = Depends(get_current_user),
    manager: BookingLifecycleManager = Depends(get_booking_manager)
):
    result = await manager.submit_feedback(
        booking_id,
        current_user["id"],
        feedback.rating,
        feedback.comments
    )
    if isinstance(result, Rejection):
        raise rejection_to_http(result)
    return BookingActionResponse(success=True, booking=result)


@bookings_router.post("/{booking_id}/complete", response_model=BookingActionResponse)
async def complete_booking(
    booking_id: str,
    admin: dict = Depends(require_admin),
    manager: BookingLifecycleManager = Depends(get_booking_manager)
):
    result = await manager.mark_completed(booking_id)
    if isinstance(result, Rejection):
        raise rejection_to_http(result)
    return BookingActionResponse(success=True, booking=result)
