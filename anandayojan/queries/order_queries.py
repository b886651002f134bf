# anandayojan/queries/order_queries.py
from typing import Optional, List
import asyncpg
from datetime import datetime

async def insert_order(
    conn: asyncpg.Connection,
    order_id: str,
    owner_id: str,
    gateway_order_id: Optional[str],
    status: str,
    created_at: datetime,
    data: str
) -> None:
    """Insert a new product order"""
    await conn.execute(
        """
        INSERT INTO product_order (
            order_id, owner_id, gateway_order_id,
            status, created_at, data
        )
        VALUES ($1, $2, $3, $4, $5, $6::jsonb)
        """,
        order_id, owner_id, gateway_order_id,
        status, created_at, data
    )

async def get_order_by_id(
    conn: asyncpg.Connection,
    order_id: str
) -> Optional[str]:
    return await conn.fetchval(
        "SELECT data::text FROM product_order WHERE order_id = $1",
        order_id
    )

async def get_order_by_gateway_order(
    conn: asyncpg.Connection,
    gateway_order_id: str
) -> Optional[str]:
    return await conn.fetchval(
        "SELECT data::text FROM product_order WHERE gateway_order_id = $1",
        gateway_order_id
    )

async def update_order(
    conn: asyncpg.Connection,
    order_id: str,
    gateway_order_id: Optional[str],
    status: str,
    data: str
) -> None:
    await conn.execute(
        """
        UPDATE product_order
        SET gateway_order_id = $2, status = $3, data = $4::jsonb
        WHERE order_id = $1
        """,
        order_id, gateway_order_id, status, data
    )

async def get_owner_orders(
    conn: asyncpg.Connection,
    owner_id: str
) -> List[str]:
    """Get orders placed by a user, newest first"""
    rows = await conn.fetch(
        """
        SELECT data::text AS data FROM product_order
        WHERE owner_id = $1
        ORDER BY created_at DESC
        """,
        owner_id
    )
    return [row["data"] for row in rows]

async def lock_order(conn: asyncpg.Connection, order_id: str) -> None:
    await conn.execute(
        "SELECT pg_advisory_xact_lock(hashtext($1))",
        f"order:{order_id}"
    )
