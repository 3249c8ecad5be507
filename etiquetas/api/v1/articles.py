"""Article catalog endpoints. Every route requires authentication; writes are role-gated."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from etiquetas.api.v1.auth import get_current_user, require_admin, require_roles
from etiquetas.core.database import get_db
from etiquetas.models import RoleName
from etiquetas.schemas.article import (
    ArticleCreate,
    ArticleListResponse,
    ArticleOut,
    ArticleResponse,
    ArticleUpdate,
    CategoriesResponse,
)
from etiquetas.schemas.auth import CurrentUser
from etiquetas.schemas.common import Pagination, StatusUpdate
from etiquetas.services import articles as article_service

router = APIRouter(dependencies=[Depends(get_current_user)])

require_editor = require_roles(RoleName.ADMIN, RoleName.SUPERVISOR)


@router.get("", response_model=ArticleListResponse)
def list_articles(
    db: Annotated[Session, Depends(get_db)],
    categoria: str | None = None,
    tipo_etiqueta: str | None = None,
    activo: bool | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> ArticleListResponse:
    """
    List articles newest first.

    Optional filters (combined with AND): categoria, tipo_etiqueta, activo, and
    search (case-insensitive substring of sku or descripcion). limit defaults to
    PAGINATION_DEFAULT_LIMIT and is capped at PAGINATION_MAX_LIMIT.
    """
    filters = article_service.build_filters(
        categoria=categoria,
        tipo_etiqueta=tipo_etiqueta,
        activo=activo,
        search=search,
        page=page,
        limit=limit,
    )
    articles, total = article_service.list_articles(db, filters)
    return ArticleListResponse(
        data=[ArticleOut.model_validate(a) for a in articles],
        pagination=Pagination(**filters.pagination(total)),
    )


@router.get("/categorias", response_model=CategoriesResponse)
def list_categories(db: Annotated[Session, Depends(get_db)]) -> CategoriesResponse:
    """Sorted distinct categories of active articles."""
    return CategoriesResponse(data=article_service.list_categories(db))


@router.get("/sku/{sku}", response_model=ArticleResponse)
def get_article_by_sku(sku: str, db: Annotated[Session, Depends(get_db)]) -> ArticleResponse:
    article = article_service.get_article_by_sku(db, sku)
    return ArticleResponse(data=ArticleOut.model_validate(article))


@router.get("/{article_id}", response_model=ArticleResponse)
def get_article(article_id: int, db: Annotated[Session, Depends(get_db)]) -> ArticleResponse:
    article = article_service.get_article(db, article_id)
    return ArticleResponse(data=ArticleOut.model_validate(article))


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
def create_article(
    body: ArticleCreate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require_editor)],
) -> ArticleResponse:
    """Create an article (Administrador, Supervisor). sku must be unused."""
    article = article_service.create_article(db, body)
    return ArticleResponse(
        message="Artículo creado exitosamente",
        data=ArticleOut.model_validate(article),
    )


@router.put("/{article_id}", response_model=ArticleResponse)
def update_article(
    article_id: int,
    body: ArticleUpdate,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require_editor)],
) -> ArticleResponse:
    """Partial update (Administrador, Supervisor): omitted fields keep their value."""
    article = article_service.update_article(db, article_id, body)
    return ArticleResponse(
        message="Artículo actualizado exitosamente",
        data=ArticleOut.model_validate(article),
    )


@router.delete("/{article_id}", response_model=ArticleResponse)
def delete_article(
    article_id: int,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> ArticleResponse:
    """Soft delete (Administrador): sets activo=false."""
    article = article_service.deactivate_article(db, article_id)
    return ArticleResponse(
        message="Artículo desactivado exitosamente",
        data=ArticleOut.model_validate(article),
    )


@router.patch("/{article_id}/estado", response_model=ArticleResponse)
def set_article_status(
    article_id: int,
    body: StatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
) -> ArticleResponse:
    """Set the active flag explicitly (Administrador). Body: {"activo": true|false}."""
    article = article_service.set_article_status(db, article_id, body.activo)
    state = "activado" if article.activo else "desactivado"
    return ArticleResponse(
        message=f"Artículo {state} exitosamente",
        data=ArticleOut.model_validate(article),
    )
