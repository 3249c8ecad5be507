"""Request/response schemas for auth endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from etiquetas.schemas.common import ApiModel


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class ChangePasswordRequest(ApiModel):
    """Current and new password; presence and length are checked by the auth service."""

    password_actual: str | None = Field(default=None, alias="passwordActual")
    password_nuevo: str | None = Field(default=None, alias="passwordNuevo")


class CurrentUser(ApiModel):
    """Authenticated identity attached to the request by get_current_user."""

    id: int
    uuid: UUID
    username: str
    email: str
    nombre: str
    apellido: str
    rol_id: int = Field(..., alias="rolId")
    rol: str


class UserProfile(ApiModel):
    """Normalized profile returned by login and /perfil."""

    id: int
    uuid: UUID
    username: str
    email: str
    nombre: str
    apellido: str
    nombre_completo: str = Field(..., alias="nombreCompleto")
    rol: str
    rol_id: int = Field(..., alias="rolId")
    ultimo_acceso: datetime | None = Field(default=None, alias="ultimoAcceso")
    created_at: datetime | None = Field(default=None, alias="creadoEn")


class LoginResponse(BaseModel):
    """JWT and profile returned after a successful login."""

    success: bool = True
    message: str = "Login exitoso"
    token: str = Field(..., description="JWT access token, sent back as 'Bearer <token>'")
    usuario: UserProfile


class ProfileResponse(BaseModel):
    success: bool = True
    usuario: UserProfile


class TokenCheckResponse(BaseModel):
    success: bool = True
    message: str = "Token válido"
    usuario: CurrentUser
