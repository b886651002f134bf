# anandayojan/database.py
import asyncpg
from .config import settings

async def connect() -> asyncpg.Connection:
    return await asyncpg.connect(
        user=settings.database_username,
        password=settings.database_password,
        database=settings.database_name,
        host=settings.database_hostname,
        port=settings.database_port
    )
