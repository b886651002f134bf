# anandayojan/__init__.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .database import connect
from .queries import create_schema
from .routes import routers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.use_mock:
        logger.info("Running in mock mode: in-memory stores and fake payment, email and Google services")
    else:
        conn = await connect()
        try:
            await create_schema(conn)
        finally:
            await conn.close()
    yield


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    app = FastAPI(
        title="AnandAyojan API",
        description="Bookings, deposits and orders for AnandAyojan event services",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include all routers
    for router in routers:
        app.include_router(router)

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "mockMode": settings.use_mock,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    return app
