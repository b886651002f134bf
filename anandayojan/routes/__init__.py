# anandayojan/routes/__init__.py
from .auth import auth_router
from .bookings import bookings_router
from .admin import admin_router
from .payments import payments_router
from .orders import orders_router

routers = [
    auth_router,
    bookings_router,
    admin_router,
    payments_router,
    orders_router
]

__all__ = ["routers"]
