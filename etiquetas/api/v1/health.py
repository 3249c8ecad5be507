"""Service info and health check endpoints (no authentication)."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from etiquetas.core.config import settings
from etiquetas.core.database import check_db_connected, get_db
from etiquetas.schemas.health import HealthResponse, InfoResponse

router = APIRouter()

_STARTED_AT = time.monotonic()


@router.get("/", response_model=InfoResponse)
def get_info() -> InfoResponse:
    """Root route; minimal payload for discovery."""
    return InfoResponse(
        message=settings.APP_NAME,
        version=settings.APP_VERSION,
        timestamp=datetime.now(UTC),
    )


@router.get("/health", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return uptime and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        uptime=round(time.monotonic() - _STARTED_AT, 3),
        timestamp=datetime.now(UTC),
        environment=settings.APP_ENV,
        database=db_status,
    )
