"""Request/response schemas for the article catalog."""

from datetime import datetime

from pydantic import BaseModel, Field

from etiquetas.schemas.common import ApiModel, Pagination


class ArticleFields(BaseModel):
    """Writable article fields. All optional here; create() enforces the required ones."""

    sku: str | None = Field(default=None, max_length=100)
    descripcion: str | None = None
    categoria: str | None = Field(default=None, max_length=100)
    color: str | None = Field(default=None, max_length=50)
    size: str | None = Field(default=None, max_length=50)
    tipo_etiqueta: str | None = Field(
        default=None, description="Label type: qr, barcode or shipping"
    )
    codigo_barras: str | None = Field(default=None, max_length=100)
    imagen_url: str | None = Field(default=None, max_length=1024)


class ArticleCreate(ArticleFields):
    pass


class ArticleUpdate(ArticleFields):
    """Partial update: omitted or null fields keep their stored value."""


class ArticleOut(ApiModel):
    id: int
    sku: str
    descripcion: str
    categoria: str
    color: str | None = None
    size: str | None = None
    tipo_etiqueta: str
    codigo_barras: str | None = None
    imagen_url: str | None = None
    activo: bool
    created_at: datetime
    updated_at: datetime


class ArticleResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: ArticleOut


class ArticleListResponse(BaseModel):
    success: bool = True
    data: list[ArticleOut]
    pagination: Pagination


class CategoriesResponse(BaseModel):
    success: bool = True
    data: list[str]
