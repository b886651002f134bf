# anandayojan/queries/schema.py
import asyncpg

# Records live in a JSONB column; only the columns that are filtered or
# joined on are broken out and indexed.
SCHEMA = """
CREATE TABLE IF NOT EXISTS app_user (
    user_id TEXT PRIMARY KEY,
    email TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    data JSONB NOT NULL
);
CREATE UNIQUE INDEX IF NOT EXISTS ux_app_user_email ON app_user (lower(email));

CREATE TABLE IF NOT EXISTS booking (
    booking_id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    gateway_order_id TEXT UNIQUE,
    status TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL,
    data JSONB NOT NULL
);
CREATE INDEX IF NOT EXISTS ix_booking_owner_id ON booking (owner_id, created_at DESC);

CREATE TABLE IF NOT EXISTS product_order (
    order_id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    gateway_order_id TEXT UNIQUE,
    status TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL,
    data JSONB NOT NULL
);
CREATE INDEX IF NOT EXISTS ix_product_order_owner_id ON product_order (owner_id, created_at DESC);
"""

async def create_schema(conn: asyncpg.Connection) -> None:
    """Create the tables if they do not exist yet"""
    await conn.execute(SCHEMA)
