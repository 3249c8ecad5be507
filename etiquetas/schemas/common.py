"""Shared response envelope pieces."""

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """Base for payloads read from ORM rows and exposed with camelCase aliases."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Pagination(ApiModel):
    """Page metadata returned by listing endpoints."""

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0, alias="totalPages")


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class StatusUpdate(BaseModel):
    """Body of PATCH .../estado. activo is checked explicitly so a missing value maps to a 400."""

    activo: bool | None = Field(default=None, description="New value of the active flag")
