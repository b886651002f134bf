# anandayojan/routes/admin.py
from fastapi import APIRouter, Depends

from ..dependencies import get_booking_manager
from ..lifecycle import BookingLifecycleManager
from ..models.booking import BookingList
from ..utils.auth import require_admin

admin_router = APIRouter(prefix="/admin", tags=["Admin"])


@admin_router.get("/bookings", response_model=BookingList)
async def list_all_bookings(
    admin: dict = Depends(require_admin),
    manager: BookingLifecycleManager = Depends(get_booking_manager)
):
    return BookingList(bookings=await manager.list_all_bookings())
