# anandayojan/dependencies.py
from functools import lru_cache
from typing import AsyncGenerator, NamedTuple

from fastapi import Depends

from .config import settings
from .database import connect
from .lifecycle import BookingLifecycleManager
from .orders import OrderManager
from .services import get_notifier, get_payment_gateway
from .stores import (
    BookingStore,
    InMemoryBookingStore,
    InMemoryOrderStore,
    InMemoryUserStore,
    OrderStore,
    PostgresBookingStore,
    PostgresOrderStore,
    PostgresUserStore,
    UserStore
)


class Stores(NamedTuple):
    bookings: BookingStore
    orders: OrderStore
    users: UserStore


@lru_cache
def _memory_stores() -> Stores:
    return Stores(InMemoryBookingStore(), InMemoryOrderStore(), InMemoryUserStore())


async def get_stores() -> AsyncGenerator[Stores, None]:
    """In-memory stores in mock mode, otherwise stores on a per-request connection."""
    if settings.use_mock:
        yield _memory_stores()
        return

    conn = await connect()
    try:
        yield Stores(
            PostgresBookingStore(conn),
            PostgresOrderStore(conn),
            PostgresUserStore(conn)
        )
    finally:
        await conn.close()


def get_booking_manager(stores: Stores = Depends(get_stores)) -> BookingLifecycleManager:
    return BookingLifecycleManager(
        stores.bookings,
        get_payment_gateway(),
        get_notifier(),
        booking_timezone=settings.booking_timezone
    )


def get_order_manager(stores: Stores = Depends(get_stores)) -> OrderManager:
    return OrderManager(stores.orders, get_payment_gateway(), get_notifier())


def get_user_store(stores: Stores = Depends(get_stores)) -> UserStore:
    return stores.users
