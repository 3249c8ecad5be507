"""Article catalog: filtered listing, lookups, validated create/update and soft delete."""

import logging

from sqlalchemy import func, select, text
from sqlalchemy.orm import Session

from etiquetas.core.database import store_errors, transaction
from etiquetas.core.exceptions import ConflictError, NotFoundError, ValidationError
from etiquetas.core.query_builder import FilterQuery
from etiquetas.models import Article, LabelType
from etiquetas.models.article import LABEL_TYPE_ALIASES
from etiquetas.schemas.article import ArticleCreate, ArticleUpdate

logger = logging.getLogger(__name__)

ARTICLE_COLUMNS = (
    "id, sku, descripcion, categoria, color, size, tipo_etiqueta, "
    "codigo_barras, imagen_url, activo, created_at, updated_at"
)
SEARCH_COLUMNS = ("sku", "descripcion")
REQUIRED_FIELDS = ("sku", "descripcion", "categoria", "tipo_etiqueta")
OPTIONAL_FIELDS = ("color", "size", "codigo_barras", "imagen_url")

NOT_FOUND_MESSAGE = "Artículo no encontrado"
SKU_TAKEN_MESSAGE = "El SKU ya existe"
SKU_TAKEN_ELSEWHERE_MESSAGE = "El SKU ya existe en otro artículo"


def normalize_label_type(value: str) -> str:
    """Return the canonical label type value or raise ValidationError."""
    key = value.strip().lower()
    if key in LABEL_TYPE_ALIASES:
        return LABEL_TYPE_ALIASES[key].value
    try:
        return LabelType(key).value
    except ValueError:
        allowed = ", ".join(t.value for t in LabelType)
        raise ValidationError(f"Tipo de etiqueta inválido ({allowed})") from None


def build_filters(
    categoria: str | None = None,
    tipo_etiqueta: str | None = None,
    activo: bool | str | None = None,
    search: str | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> FilterQuery:
    query = FilterQuery(page=page, limit=limit)
    query.equals("categoria", categoria)
    if tipo_etiqueta:
        try:
            label_type = normalize_label_type(tipo_etiqueta)
        except ValidationError:
            # Unknown types are not rejected; they match no rows.
            label_type = tipo_etiqueta.strip().lower()
        query.equals("tipo_etiqueta", label_type)
    query.flag("activo", activo)
    query.search(SEARCH_COLUMNS, search)
    return query


def list_articles(db: Session, filters: FilterQuery) -> tuple[list[Article], int]:
    """Return one page of matching articles (newest first) and the total match count."""
    with store_errors("Error al listar artículos"):
        total = db.execute(
            text(filters.count_sql("articulos")), filters.bind_params()
        ).scalar_one()
        page_stmt = text(filters.page_sql(f"SELECT {ARTICLE_COLUMNS} FROM articulos"))
        articles = db.scalars(
            select(Article).from_statement(page_stmt),
            filters.bind_params(paginated=True),
        ).all()
    return list(articles), int(total)


def list_categories(db: Session) -> list[str]:
    """Sorted distinct categories among active articles."""
    with store_errors("Error al obtener categorías"):
        rows = (
            db.query(Article.categoria)
            .filter(Article.activo.is_(True))
            .distinct()
            .order_by(Article.categoria)
            .all()
        )
    return [row.categoria for row in rows]


def get_article(db: Session, article_id: int) -> Article:
    with store_errors("Error al obtener artículo"):
        article = db.get(Article, article_id)
    if article is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return article


def get_article_by_sku(db: Session, sku: str) -> Article:
    with store_errors("Error al buscar artículo"):
        article = db.query(Article).filter(Article.sku == sku).first()
    if article is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return article


def create_article(db: Session, payload: ArticleCreate) -> Article:
    """
    Insert a new active article.

    sku, descripcion, categoria and tipo_etiqueta are required; empty optional
    fields are stored as NULL. A duplicate sku raises ConflictError, whether
    caught by the pre-check or by the unique index.
    """
    data = payload.model_dump()
    missing = [name for name in REQUIRED_FIELDS if not (data.get(name) or "").strip()]
    if missing:
        raise ValidationError(
            "SKU, descripción, categoría y tipo de etiqueta son requeridos",
            extra={"campos": missing},
        )
    data["tipo_etiqueta"] = normalize_label_type(data["tipo_etiqueta"])
    for name in OPTIONAL_FIELDS:
        data[name] = data[name] or None

    with store_errors("Error al crear artículo"):
        if db.query(Article.id).filter(Article.sku == data["sku"]).first() is not None:
            raise ConflictError(SKU_TAKEN_MESSAGE)
        article = Article(**data, activo=True)
        with transaction(db, conflict_message=SKU_TAKEN_MESSAGE):
            db.add(article)
        db.refresh(article)
    logger.info("Article created id=%s sku=%s", article.id, article.sku)
    return article


def update_article(db: Session, article_id: int, payload: ArticleUpdate) -> Article:
    """
    Merge the supplied fields into the stored article.

    Omitted or null fields keep their value; an empty string clears an
    optional field. Required fields cannot be blanked.
    """
    changes = {
        name: value
        for name, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    blank = [name for name in REQUIRED_FIELDS if name in changes and not changes[name].strip()]
    if blank:
        raise ValidationError(
            "SKU, descripción, categoría y tipo de etiqueta no pueden estar vacíos",
            extra={"campos": blank},
        )
    if "tipo_etiqueta" in changes:
        changes["tipo_etiqueta"] = normalize_label_type(changes["tipo_etiqueta"])
    for name in OPTIONAL_FIELDS:
        if name in changes:
            changes[name] = changes[name] or None

    article = get_article(db, article_id)
    with store_errors("Error al actualizar artículo"):
        sku = changes.get("sku")
        if sku is not None:
            taken = (
                db.query(Article.id)
                .filter(Article.sku == sku, Article.id != article_id)
                .first()
            )
            if taken is not None:
                raise ConflictError(SKU_TAKEN_ELSEWHERE_MESSAGE)
        with transaction(db, conflict_message=SKU_TAKEN_ELSEWHERE_MESSAGE):
            for name, value in changes.items():
                setattr(article, name, value)
            article.updated_at = func.now()
        db.refresh(article)
    logger.info("Article updated id=%s fields=%s", article_id, sorted(changes))
    return article


def set_article_status(db: Session, article_id: int, activo: bool | None) -> Article:
    """Set the active flag explicitly (not a toggle of the stored value)."""
    if activo is None:
        raise ValidationError("El campo 'activo' es requerido")
    article = get_article(db, article_id)
    with store_errors("Error al cambiar estado del artículo"):
        with transaction(db):
            article.activo = activo
            article.updated_at = func.now()
        db.refresh(article)
    logger.info("Article id=%s activo=%s", article_id, activo)
    return article


def deactivate_article(db: Session, article_id: int) -> Article:
    """Soft delete: the row stays retrievable by id with activo=False."""
    return set_article_status(db, article_id, False)
