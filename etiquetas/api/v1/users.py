"""User administration endpoints. Reads need authentication; writes are Administrador only."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from etiquetas.api.v1.auth import get_current_user, require_admin
from etiquetas.core.database import get_db
from etiquetas.schemas.auth import CurrentUser
from etiquetas.schemas.common import Pagination, StatusUpdate
from etiquetas.schemas.user import (
    UserCreate,
    UserListResponse,
    UserOut,
    UserResponse,
    UserUpdate,
)
from etiquetas.services import users as user_service

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=UserListResponse)
def list_users(
    db: Annotated[Session, Depends(get_db)],
    rol_id: int | None = None,
    activo: bool | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> UserListResponse:
    """
    List users newest first, filtered by rol_id, activo and search
    (case-insensitive substring of nombre, apellido, email or username).
    """
    filters = user_service.build_filters(
        rol_id=rol_id, activo=activo, search=search, page=page, limit=limit
    )
    users, total = user_service.list_users(db, filters)
    return UserListResponse(
        data=[UserOut.model_validate(u) for u in users],
        pagination=Pagination(**filters.pagination(total)),
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Annotated[Session, Depends(get_db)]) -> UserResponse:
    user = user_service.get_user(db, user_id)
    return UserResponse(data=UserOut.model_validate(user))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> UserResponse:
    """Create a user (Administrador). username and email must be unused."""
    user = user_service.create_user(db, body)
    return UserResponse(
        message="Usuario creado exitosamente",
        data=UserOut.model_validate(user),
    )


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> UserResponse:
    """Partial update (Administrador); only supplied fields are written."""
    user = user_service.update_user(db, user_id, body)
    return UserResponse(
        message="Usuario actualizado exitosamente",
        data=UserOut.model_validate(user),
    )


@router.delete("/{user_id}", response_model=UserResponse)
def delete_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> UserResponse:
    """Soft delete (Administrador): sets activo=false."""
    user = user_service.deactivate_user(db, user_id)
    return UserResponse(
        message="Usuario desactivado exitosamente",
        data=UserOut.model_validate(user),
    )


@router.patch("/{user_id}/estado", response_model=UserResponse)
def set_user_status(
    user_id: int,
    body: StatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> UserResponse:
    """Set the active flag explicitly (Administrador)."""
    user = user_service.set_user_status(db, user_id, body.activo)
    state = "activado" if user.activo else "desactivado"
    return UserResponse(
        message=f"Usuario {state} exitosamente",
        data=UserOut.model_validate(user),
    )
