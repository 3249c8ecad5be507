"""Application error taxonomy and the FastAPI handlers that render it as JSON."""

import logging
import traceback
from typing import Any

import jwt
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from etiquetas.core.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying an HTTP status, a stable message and optional extra payload."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Error interno del servidor"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None, extra: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.extra = extra or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Error de validación"


class UnauthenticatedError(AppError):
    """Missing token, malformed header, or user not found / inactive."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Usuario no autenticado"
    headers = {"WWW-Authenticate": "Bearer"}


class TokenExpiredError(UnauthenticatedError):
    default_message = "Token expirado"


class TokenInvalidError(UnauthenticatedError):
    default_message = "Token inválido"


class InvalidCredentialsError(UnauthenticatedError):
    default_message = "Credenciales inválidas"


class InactiveAccountError(UnauthenticatedError):
    default_message = "Usuario inactivo. Contacta al administrador."


class ForbiddenError(AppError):
    """Authenticated, but the caller's role is not in the allow-list."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "No tienes permisos para acceder a este recurso"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Recurso no encontrado"


class ConflictError(AppError):
    """Uniqueness violation. Reported as 400, not 409, to keep the existing client contract."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "El recurso ya existe"


class InternalError(AppError):
    """Unexpected store or runtime failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(message: str, exc: BaseException | None = None, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message, **extra}
    if exc is not None and not settings.is_production:
        body["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """Register the JSON error handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        # Only unexpected failures expose a stack trace.
        cause = (exc.__cause__ or exc) if isinstance(exc, InternalError) else None
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(_error_body(exc.message, cause, **exc.extra)),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(
                "Error de validación", errors=jsonable_encoder(exc.errors())
            ),
        )

    @app.exception_handler(jwt.ExpiredSignatureError)
    async def expired_token_handler(request: Request, exc: jwt.ExpiredSignatureError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=_error_body(TokenExpiredError.default_message),
        )

    @app.exception_handler(jwt.PyJWTError)
    async def invalid_token_handler(request: Request, exc: jwt.PyJWTError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=_error_body(TokenInvalidError.default_message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(
                status_code=exc.status_code,
                content=_error_body("Ruta no encontrada", path=request.url.path),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = str(exc) or InternalError.default_message
        if settings.is_production:
            message = InternalError.default_message
        status_code = getattr(exc, "status_code", None)
        if not isinstance(status_code, int):
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return JSONResponse(status_code=status_code, content=_error_body(message, exc))
