# anandayojan/queries/booking_queries.py
from typing import Optional, List
import asyncpg
from datetime import datetime

async def insert_booking(
    conn: asyncpg.Connection,
    booking_id: str,
    owner_id: str,
    gateway_order_id: Optional[str],
    status: str,
    created_at: datetime,
    data: str
) -> None:
    """Insert a new booking row"""
    await conn.execute(
        """
        INSERT INTO booking (
            booking_id, owner_id, gateway_order_id,
            status, created_at, data
        )
        VALUES ($1, $2, $3, $4, $5, $6::jsonb)
        """,
        booking_id, owner_id, gateway_order_id,
        status, created_at, data
    )

async def get_booking_by_id(
    conn: asyncpg.Connection,
    booking_id: str
) -> Optional[str]:
    """Get the stored document of a booking"""
    return await conn.fetchval(
        "SELECT data::text FROM booking WHERE booking_id = $1",
        booking_id
    )

async def get_booking_by_gateway_order(
    conn: asyncpg.Connection,
    gateway_order_id: str
) -> Optional[str]:
    """Get a booking by the payment gateway order opened for its deposit"""
    return await conn.fetchval(
        "SELECT data::text FROM booking WHERE gateway_order_id = $1",
        gateway_order_id
    )

async def update_booking(
    conn: asyncpg.Connection,
    booking_id: str,
    gateway_order_id: Optional[str],
    status: str,
    data: str
) -> None:
    """Replace a booking's document and its indexed columns"""
    await conn.execute(
        """
        UPDATE booking
        SET gateway_order_id = $2, status = $3, data = $4::jsonb
        WHERE booking_id = $1
        """,
        booking_id, gateway_order_id, status, data
    )

async def get_owner_bookings(
    conn: asyncpg.Connection,
    owner_id: str
) -> List[str]:
    """Get bookings created by a user, newest first"""
    rows = await conn.fetch(
        """
        SELECT data::text AS data FROM booking
        WHERE owner_id = $1
        ORDER BY created_at DESC
        """,
        owner_id
    )
    return [row["data"] for row in rows]

async def get_all_bookings(conn: asyncpg.Connection) -> List[str]:
    rows = await conn.fetch(
        "SELECT data::text AS data FROM booking ORDER BY created_at DESC"
    )
    return [row["data"] for row in rows]

async def lock_booking(conn: asyncpg.Connection, booking_id: str) -> None:
    """Serialize writers on one booking id until the current transaction ends"""
    await conn.execute(
        "SELECT pg_advisory_xact_lock(hashtext($1))",
        f"booking:{booking_id}"
    )
