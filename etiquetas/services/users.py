"""User administration: filtered listing, create, partial update and soft delete."""

import logging

from sqlalchemy import func, or_, select, text
from sqlalchemy.orm import Session

from etiquetas.core.database import store_errors, transaction
from etiquetas.core.exceptions import ConflictError, NotFoundError, ValidationError
from etiquetas.core.query_builder import FilterQuery
from etiquetas.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, hash_password
from etiquetas.models import Role, User
from etiquetas.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = ("u.nombre", "u.apellido", "u.email", "u.username")
REQUIRED_FIELDS = ("username", "email", "nombre", "apellido", "rol_id", "password")
TEXT_FIELDS = ("username", "email", "nombre", "apellido")

NOT_FOUND_MESSAGE = "Usuario no encontrado"
IDENTITY_TAKEN_MESSAGE = "El username o email ya están en uso"


def build_filters(
    rol_id: int | None = None,
    activo: bool | str | None = None,
    search: str | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> FilterQuery:
    query = FilterQuery(page=page, limit=limit)
    query.equals("u.rol_id", rol_id)
    query.flag("u.activo", activo)
    query.search(SEARCH_COLUMNS, search)
    return query


def list_users(db: Session, filters: FilterQuery) -> tuple[list[User], int]:
    """Return one page of matching users (newest first) and the total match count."""
    with store_errors("Error al listar usuarios"):
        total = db.execute(
            text(filters.count_sql("usuarios u")), filters.bind_params()
        ).scalar_one()
        page_stmt = text(
            filters.page_sql(
                "SELECT u.* FROM usuarios u",
                order_by="u.created_at DESC, u.id DESC",
            )
        )
        users = db.scalars(
            select(User).from_statement(page_stmt),
            filters.bind_params(paginated=True),
        ).all()
        # Load roles while still inside the error guard.
        for user in users:
            _ = user.role
    return list(users), int(total)


def get_user(db: Session, user_id: int) -> User:
    with store_errors("Error al obtener usuario"):
        user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return user


def _check_password(password: str) -> None:
    if not PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN:
        raise ValidationError(
            f"El password debe tener entre {PASSWORD_MIN_LEN} y {PASSWORD_MAX_LEN} caracteres"
        )


def _check_role(db: Session, rol_id: int) -> None:
    if db.get(Role, rol_id) is None:
        raise ValidationError("El rol indicado no existe")


def _identity_taken(
    db: Session,
    username: str | None,
    email: str | None,
    exclude_id: int | None = None,
) -> bool:
    clauses = []
    if username is not None:
        clauses.append(User.username == username)
    if email is not None:
        clauses.append(User.email == email)
    if not clauses:
        return False
    query = db.query(User.id).filter(or_(*clauses))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def create_user(db: Session, payload: UserCreate) -> User:
    """
    Create an active user with a hashed password.

    All of username, email, nombre, apellido, rol_id and password are required.
    A username or email already used by any user (active or not) raises ConflictError.
    """
    data = payload.model_dump()
    missing = [
        name
        for name in REQUIRED_FIELDS
        if data.get(name) is None or (isinstance(data[name], str) and not data[name].strip())
    ]
    if missing:
        raise ValidationError(
            "Username, email, nombre, apellido, rol_id y password son requeridos",
            extra={"campos": missing},
        )
    _check_password(data["password"])

    with store_errors("Error al crear usuario"):
        _check_role(db, data["rol_id"])
        if _identity_taken(db, data["username"], data["email"]):
            raise ConflictError(IDENTITY_TAKEN_MESSAGE)
        password_hash = hash_password(data["password"])
        user = User(
            username=data["username"],
            email=data["email"],
            nombre=data["nombre"],
            apellido=data["apellido"],
            rol_id=data["rol_id"],
            password_hash=password_hash,
            activo=True,
        )
        with transaction(db, conflict_message=IDENTITY_TAKEN_MESSAGE):
            db.add(user)
        db.refresh(user)
    logger.info("User created id=%s username=%s", user.id, user.username)
    return user


def update_user(db: Session, user_id: int, payload: UserUpdate) -> User:
    """Write only the supplied fields; the password is re-hashed when present."""
    changes = {
        name: value
        for name, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if not changes:
        raise ValidationError("No hay campos para actualizar")
    blank = [name for name in TEXT_FIELDS if name in changes and not changes[name].strip()]
    if blank:
        raise ValidationError(
            "Username, email, nombre y apellido no pueden estar vacíos",
            extra={"campos": blank},
        )
    password = changes.pop("password", None)
    password_hash = None
    if password is not None:
        _check_password(password)
        password_hash = hash_password(password)

    user = get_user(db, user_id)
    with store_errors("Error al actualizar usuario"):
        if "rol_id" in changes:
            _check_role(db, changes["rol_id"])
        if _identity_taken(
            db, changes.get("username"), changes.get("email"), exclude_id=user_id
        ):
            raise ConflictError(IDENTITY_TAKEN_MESSAGE)
        with transaction(db, conflict_message=IDENTITY_TAKEN_MESSAGE):
            for name, value in changes.items():
                setattr(user, name, value)
            if password_hash is not None:
                user.password_hash = password_hash
            user.updated_at = func.now()
        db.refresh(user)
    fields = sorted([*changes, *(["password"] if password is not None else [])])
    logger.info("User updated id=%s fields=%s", user_id, fields)
    return user


def set_user_status(db: Session, user_id: int, activo: bool | None) -> User:
    """Set the active flag explicitly. Deactivated users can no longer authenticate."""
    if activo is None:
        raise ValidationError("El campo 'activo' es requerido")
    user = get_user(db, user_id)
    with store_errors("Error al cambiar estado del usuario"):
        with transaction(db):
            user.activo = activo
            user.updated_at = func.now()
        db.refresh(user)
    logger.info("User id=%s activo=%s", user_id, activo)
    return user


def deactivate_user(db: Session, user_id: int) -> User:
    """Soft delete: users are never removed from the table."""
    return set_user_status(db, user_id, False)
