"""Login, profile lookup and password changes for staff users."""

import logging
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from etiquetas.core.database import store_errors, transaction
from etiquetas.core.exceptions import (
    InactiveAccountError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from etiquetas.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    create_access_token,
    hash_password,
    verify_password,
)
from etiquetas.models import User
from etiquetas.schemas.auth import CurrentUser, UserProfile

logger = logging.getLogger(__name__)


def get_active_user(db: Session, user_id: int) -> User | None:
    """Return the user when it exists and is active; a valid token alone is not enough."""
    with store_errors("Error al verificar token"):
        return (
            db.query(User)
            .filter(User.id == user_id, User.activo.is_(True))
            .first()
        )


def to_current_user(user: User) -> CurrentUser:
    return CurrentUser(
        id=user.id,
        uuid=user.uuid,
        username=user.username,
        email=user.email,
        nombre=user.nombre,
        apellido=user.apellido,
        rol_id=user.rol_id,
        rol=user.rol,
    )


def to_profile(user: User) -> UserProfile:
    return UserProfile(
        id=user.id,
        uuid=user.uuid,
        username=user.username,
        email=user.email,
        nombre=user.nombre,
        apellido=user.apellido,
        nombre_completo=user.nombre_completo,
        rol=user.rol,
        rol_id=user.rol_id,
        ultimo_acceso=user.ultimo_acceso,
        created_at=user.created_at,
    )


def authenticate(db: Session, username: str, password: str) -> tuple[str, User]:
    """
    Check credentials and issue a token.

    Unknown username and wrong password both raise InvalidCredentialsError;
    an inactive account raises InactiveAccountError. The token is only issued,
    and ultimo_acceso only touched, after the password has been verified.
    """
    with store_errors("Error al procesar login"):
        user = db.query(User).filter(User.username == username).first()
    if user is None:
        logger.info("Login rejected: unknown username %r", username)
        raise InvalidCredentialsError()
    if not user.activo:
        logger.info("Login rejected: inactive user id=%s", user.id)
        raise InactiveAccountError()
    if not verify_password(password, user.password_hash):
        logger.info("Login rejected: wrong password for user id=%s", user.id)
        raise InvalidCredentialsError()

    with store_errors("Error al procesar login"), transaction(db):
        user.ultimo_acceso = datetime.now(UTC)
    token = create_access_token(user.id, user.username, user.rol)
    logger.info("Login succeeded for user id=%s", user.id)
    return token, user


def get_profile(db: Session, user_id: int) -> User:
    with store_errors("Error al obtener perfil"):
        user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("Usuario no encontrado")
    return user


def change_password(
    db: Session,
    user_id: int,
    current_password: str | None,
    new_password: str | None,
) -> None:
    """Verify the current password and store a hash of the new one."""
    if not current_password or not new_password:
        raise ValidationError("Password actual y nuevo son requeridos")
    if len(new_password) < PASSWORD_MIN_LEN:
        raise ValidationError(
            f"El password nuevo debe tener al menos {PASSWORD_MIN_LEN} caracteres"
        )
    if len(new_password) > PASSWORD_MAX_LEN:
        raise ValidationError(
            f"El password nuevo no puede superar {PASSWORD_MAX_LEN} caracteres"
        )

    user = get_profile(db, user_id)
    if not verify_password(current_password, user.password_hash):
        raise InvalidCredentialsError("Password actual incorrecto")

    new_hash = hash_password(new_password)
    with store_errors("Error al cambiar password"), transaction(db):
        user.password_hash = new_hash
        user.updated_at = func.now()
    logger.info("Password changed for user id=%s", user_id)
