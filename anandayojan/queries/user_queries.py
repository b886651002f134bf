# anandayojan/queries/user_queries.py
from typing import Optional
import asyncpg

async def create_user(
    conn: asyncpg.Connection,
    user_id: str,
    email: str,
    data: str
) -> None:
    """Create a password user"""
    await conn.execute(
        """
        INSERT INTO app_user (user_id, email, data)
        VALUES ($1, $2, $3::jsonb)
        """,
        user_id, email, data
    )

async def get_user_by_email(
    conn: asyncpg.Connection,
    email: str
) -> Optional[str]:
    return await conn.fetchval(
        "SELECT data::text FROM app_user WHERE lower(email) = lower($1)",
        email
    )
