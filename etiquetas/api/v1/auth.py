"""JWT login, profile endpoints and auth dependencies (get_current_user, require_roles)."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from etiquetas.core.database import get_db
from etiquetas.core.exceptions import (
    AppError,
    ForbiddenError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthenticatedError,
)
from etiquetas.core.security import decode_access_token
from etiquetas.models import RoleName
from etiquetas.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    TokenCheckResponse,
)
from etiquetas.schemas.common import MessageResponse
from etiquetas.services import auth as auth_service

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _authenticate_request(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    db: Session,
) -> CurrentUser:
    if credentials is None:
        # HTTPBearer yields None both for a missing header and for a malformed one.
        if request.headers.get("Authorization"):
            raise UnauthenticatedError("Formato de token inválido")
        raise UnauthenticatedError("No se proporcionó token de autenticación")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError() from None
    except jwt.PyJWTError:
        raise TokenInvalidError() from None
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise TokenInvalidError() from None
    user = auth_service.get_active_user(db, user_id)
    if user is None:
        raise UnauthenticatedError("Usuario no encontrado o inactivo")
    return auth_service.to_current_user(user)


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT for an active user. Raises 401 otherwise."""
    return _authenticate_request(request, credentials, db)


def get_optional_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser | None:
    """Dependency: like get_current_user, but any failure yields None instead of a 401."""
    try:
        return _authenticate_request(request, credentials, db)
    except AppError:
        return None


def check_role(user: CurrentUser | None, allowed: tuple[RoleName, ...]) -> CurrentUser:
    """Raise unless user is authenticated and its role is in the allow-list."""
    if user is None:
        raise UnauthenticatedError()
    allowed_names = [role.value for role in allowed]
    if user.rol not in allowed_names:
        raise ForbiddenError(extra={"rolRequerido": allowed_names, "tuRol": user.rol})
    return user


def require_roles(*roles: RoleName) -> Callable[..., CurrentUser]:
    """Build a dependency that lets only the given roles through (403 for the rest)."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        return check_role(current_user, roles)

    return dependency


require_admin = require_roles(RoleName.ADMIN)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT access token and the user profile.
    Include the token in the Authorization header as: Bearer <token>
    """
    token, user = auth_service.authenticate(db, body.username, body.password)
    return LoginResponse(token=token, usuario=auth_service.to_profile(user))


@router.get("/perfil", response_model=ProfileResponse)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ProfileResponse:
    """Profile of the authenticated caller."""
    user = auth_service.get_profile(db, current_user.id)
    return ProfileResponse(usuario=auth_service.to_profile(user))


@router.post("/cambiar-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Change the caller's password; the current password must be supplied."""
    auth_service.change_password(
        db, current_user.id, body.password_actual, body.password_nuevo
    )
    return MessageResponse(message="Password actualizado correctamente")


@router.get("/verificar-token", response_model=TokenCheckResponse)
def verify_token(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> TokenCheckResponse:
    """Reaching this handler means the token is valid; echo the attached identity."""
    return TokenCheckResponse(usuario=current_user)
