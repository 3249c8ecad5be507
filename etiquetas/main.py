"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from etiquetas.api.v1 import health
from etiquetas.api.v1 import router as api_router
from etiquetas.core.config import settings
from etiquetas.core.database import SessionLocal, check_db_connected, engine
from etiquetas.core.exceptions import register_exception_handlers
from etiquetas.core.logging_config import add_request_logging, configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Verify the database on startup and release the connection pool on shutdown."""
    logger.info("Starting %s v%s (env=%s)", settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV)
    if settings.DB_CHECK_ON_STARTUP:
        db = SessionLocal()
        try:
            connected = check_db_connected(db)
        finally:
            db.close()
        if not connected:
            logger.error("Could not connect to the database; refusing to start")
            raise RuntimeError("Database is not reachable")
        logger.info("Database connection verified")
    yield
    logger.info("Shutting down; disposing database connection pool")
    engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)

if settings.APP_ENV == "dev":
    add_request_logging(app)

register_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(api_router, prefix=settings.API_PREFIX)
