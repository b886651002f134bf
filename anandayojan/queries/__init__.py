from .schema import create_schema
from .booking_queries import (
    insert_booking,
    get_booking_by_id,
    get_booking_by_gateway_order,
    update_booking,
    get_owner_bookings,
    get_all_bookings,
    lock_booking
)
from .order_queries import (
    insert_order,
    get_order_by_id,
    get_order_by_gateway_order,
    update_order,
    get_owner_orders,
    lock_order
)
from .user_queries import create_user, get_user_by_email

__all__ = [
    'create_schema',

    # Booking queries
    'insert_booking',
    'get_booking_by_id',
    'get_booking_by_gateway_order',
    'update_booking',
    'get_owner_bookings',
    'get_all_bookings',
    'lock_booking',

    # Order queries
    'insert_order',
    'get_order_by_id',
    'get_order_by_gateway_order',
    'update_order',
    'get_owner_orders',
    'lock_order',

    # User queries
    'create_user',
    'get_user_by_email'
]
