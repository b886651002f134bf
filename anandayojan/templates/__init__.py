from .booking_confirmation import render_booking_confirmation
from .order_confirmation import render_order_confirmation

__all__ = ["render_booking_confirmation", "render_order_confirmation"]
