"""Pydantic schemas for the service info and health check responses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class InfoResponse(BaseModel):
    """Response body for GET /."""

    success: bool = True
    message: str
    version: str
    timestamp: datetime


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    success: bool = True
    status: Literal["OK"] = Field(default="OK", description="Service status")
    uptime: float = Field(description="Seconds since the process started serving")
    timestamp: datetime
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Database connectivity status when check is performed",
    )
