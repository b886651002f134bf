# anandayojan/stores.py
"""
Persistence collaborators for bookings, product orders and password users.

Every store offers ``lock(key)``, an async context manager that serializes
writers on one record: the lifecycle code checks its guards and writes the
new state inside that critical section. The in-memory stores back mock mode
and the tests; the Postgres stores keep one JSONB document per record.
"""
import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Protocol

import asyncpg

from .models.auth import User
from .models.booking import Booking
from .models.order import Order
from .queries import booking_queries, order_queries, user_queries


class BookingStore(Protocol):
    async def insert(self, booking: Booking) -> None: ...
    async def get(self, booking_id: str) -> Optional[Booking]: ...
    async def get_by_gateway_order_id(self, gateway_order_id: str) -> Optional[Booking]: ...
    async def update(self, booking: Booking) -> None: ...
    async def list_for_owner(self, owner_id: str) -> List[Booking]: ...
    async def list_all(self) -> List[Booking]: ...
    def lock(self, booking_id: str): ...


class OrderStore(Protocol):
    async def insert(self, order: Order) -> None: ...
    async def get(self, order_id: str) -> Optional[Order]: ...
    async def get_by_gateway_order_id(self, gateway_order_id: str) -> Optional[Order]: ...
    async def update(self, order: Order) -> None: ...
    async def list_for_owner(self, owner_id: str) -> List[Order]: ...
    def lock(self, order_id: str): ...


class UserStore(Protocol):
    async def insert(self, user: User) -> None: ...
    async def get_by_email(self, email: str) -> Optional[User]: ...


class KeyedLock:
    """One asyncio.Lock per key, dropped once nobody holds or waits for it."""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class InMemoryBookingStore:
    def __init__(self):
        self._bookings: Dict[str, Booking] = {}
        self._by_owner: Dict[str, List[str]] = defaultdict(list)
        self._locks = KeyedLock()

    async def insert(self, booking: Booking) -> None:
        if booking.id in self._bookings:
            raise ValueError(f"Booking {booking.id} already exists")
        self._bookings[booking.id] = booking.model_copy(deep=True)
        self._by_owner[booking.owner_id].append(booking.id)

    async def get(self, booking_id: str) -> Optional[Booking]:
        booking = self._bookings.get(booking_id)
        return booking.model_copy(deep=True) if booking else None

    async def get_by_gateway_order_id(self, gateway_order_id: str) -> Optional[Booking]:
        for booking in self._bookings.values():
            if booking.gateway_order_id == gateway_order_id:
                return booking.model_copy(deep=True)
        return None

    async def update(self, booking: Booking) -> None:
        if booking.id not in self._bookings:
            raise KeyError(booking.id)
        self._bookings[booking.id] = booking.model_copy(deep=True)

    async def list_for_owner(self, owner_id: str) -> List[Booking]:
        bookings = [self._bookings[i] for i in self._by_owner.get(owner_id, [])]
        bookings.sort(key=lambda b: b.created_at, reverse=True)
        return [b.model_copy(deep=True) for b in bookings]

    async def list_all(self) -> List[Booking]:
        bookings = sorted(self._bookings.values(), key=lambda b: b.created_at, reverse=True)
        return [b.model_copy(deep=True) for b in bookings]

    def lock(self, booking_id: str):
        return self._locks.hold(booking_id)


class InMemoryOrderStore:
    def __init__(self):
        self._orders: Dict[str, Order] = {}
        self._locks = KeyedLock()

    async def insert(self, order: Order) -> None:
        if order.id in self._orders:
            raise ValueError(f"Order {order.id} already exists")
        self._orders[order.id] = order.model_copy(deep=True)

    async def get(self, order_id: str) -> Optional[Order]:
        order = self._orders.get(order_id)
        return order.model_copy(deep=True) if order else None

    async def get_by_gateway_order_id(self, gateway_order_id: str) -> Optional[Order]:
        for order in self._orders.values():
            if order.gateway_order_id == gateway_order_id:
                return order.model_copy(deep=True)
        return None

    async def update(self, order: Order) -> None:
        if order.id not in self._orders:
            raise KeyError(order.id)
        self._orders[order.id] = order.model_copy(deep=True)

    async def list_for_owner(self, owner_id: str) -> List[Order]:
        orders = [o for o in self._orders.values() if o.owner_id == owner_id]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return [o.model_copy(deep=True) for o in orders]

    def lock(self, order_id: str):
        return self._locks.hold(order_id)


class InMemoryUserStore:
    def __init__(self):
        self._users: Dict[str, User] = {}

    async def insert(self, user: User) -> None:
        key = user.email.lower()
        if key in self._users:
            raise ValueError("User with this email already exists")
        self._users[key] = user

    async def get_by_email(self, email: str) -> Optional[User]:
        return self._users.get(email.lower())


class PostgresBookingStore:
    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def insert(self, booking: Booking) -> None:
        await booking_queries.insert_booking(
            self.conn,
            booking.id,
            booking.owner_id,
            booking.gateway_order_id,
            booking.status.value,
            booking.created_at,
            booking.model_dump_json(by_alias=True)
        )

    async def get(self, booking_id: str) -> Optional[Booking]:
        data = await booking_queries.get_booking_by_id(self.conn, booking_id)
        return Booking.model_validate_json(data) if data else None

    async def get_by_gateway_order_id(self, gateway_order_id: str) -> Optional[Booking]:
        data = await booking_queries.get_booking_by_gateway_order(self.conn, gateway_order_id)
        return Booking.model_validate_json(data) if data else None

    async def update(self, booking: Booking) -> None:
        await booking_queries.update_booking(
            self.conn,
            booking.id,
            booking.gateway_order_id,
            booking.status.value,
            booking.model_dump_json(by_alias=True)
        )

    async def list_for_owner(self, owner_id: str) -> List[Booking]:
        rows = await booking_queries.get_owner_bookings(self.conn, owner_id)
        return [Booking.model_validate_json(data) for data in rows]

    async def list_all(self) -> List[Booking]:
        rows = await booking_queries.get_all_bookings(self.conn)
        return [Booking.model_validate_json(data) for data in rows]

    @asynccontextmanager
    async def lock(self, booking_id: str) -> AsyncIterator[None]:
        async with self.conn.transaction():
            await booking_queries.lock_booking(self.conn, booking_id)
            yield


class PostgresOrderStore:
    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def insert(self, order: Order) -> None:
        await order_queries.insert_order(
            self.conn,
            order.id,
            order.owner_id,
            order.gateway_order_id,
            order.status.value,
            order.created_at,
            order.model_dump_json(by_alias=True)
        )

    async def get(self, order_id: str) -> Optional[Order]:
        data = await order_queries.get_order_by_id(self.conn, order_id)
        return Order.model_validate_json(data) if data else None

    async def get_by_gateway_order_id(self, gateway_order_id: str) -> Optional[Order]:
        data = await order_queries.get_order_by_gateway_order(self.conn, gateway_order_id)
        return Order.model_validate_json(data) if data else None

    async def update(self, order: Order) -> None:
        await order_queries.update_order(
            self.conn,
            order.id,
            order.gateway_order_id,
            order.status.value,
            order.model_dump_json(by_alias=True)
        )

    async def list_for_owner(self, owner_id: str) -> List[Order]:
        rows = await order_queries.get_owner_orders(self.conn, owner_id)
        return [Order.model_validate_json(data) for data in rows]

    @asynccontextmanager
    async def lock(self, order_id: str) -> AsyncIterator[None]:
        async with self.conn.transaction():
            await order_queries.lock_order(self.conn, order_id)
            yield


class PostgresUserStore:
    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def insert(self, user: User) -> None:
        try:
            await user_queries.create_user(
                self.conn, user.id, user.email, user.model_dump_json()
            )
        except asyncpg.UniqueViolationError as e:
            raise ValueError("User with this email already exists") from e

    async def get_by_email(self, email: str) -> Optional[User]:
        data = await user_queries.get_user_by_email(self.conn, email)
        return User.model_validate_json(data) if data else None


__all__ = [
    "BookingStore", "OrderStore", "UserStore", "KeyedLock",
    "InMemoryBookingStore", "InMemoryOrderStore", "InMemoryUserStore",
    "PostgresBookingStore", "PostgresOrderStore", "PostgresUserStore",
]
