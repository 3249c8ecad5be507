"""Request/response schemas for user administration."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from etiquetas.schemas.common import ApiModel, Pagination


class UserCreate(BaseModel):
    """New user. Fields are optional here so missing ones get a single 400 message."""

    username: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None
    nombre: str | None = Field(default=None, max_length=100)
    apellido: str | None = Field(default=None, max_length=100)
    rol_id: int | None = None
    password: str | None = Field(default=None, max_length=128)


class UserUpdate(UserCreate):
    """Only supplied fields are written; password is re-hashed when present."""

    activo: bool | None = None


class UserOut(ApiModel):
    """User as exposed by the API (never includes the password hash)."""

    id: int
    uuid: UUID
    username: str
    email: str
    nombre: str
    apellido: str
    rol_id: int
    rol: str
    activo: bool
    ultimo_acceso: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: UserOut


class UserListResponse(BaseModel):
    success: bool = True
    data: list[UserOut]
    pagination: Pagination
