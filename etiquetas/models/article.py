"""ORM model for labeled catalog articles."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func, true

from etiquetas.models.base import Base


class LabelType(str, Enum):
    """Kinds of label an article can be printed with."""

    QR = "qr"
    BARCODE = "barcode"
    SHIPPING = "shipping"


# Input aliases still sent by older clients.
LABEL_TYPE_ALIASES: dict[str, LabelType] = {"envio": LabelType.SHIPPING}


class Article(Base):
    """
    Catalog entry identified by a unique SKU.

    tipo_etiqueta stores a LabelType value. Deletion is soft (activo=False).
    """

    __tablename__ = "articulos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sku = Column(String(100), nullable=False, unique=True, index=True)
    descripcion = Column(Text, nullable=False)
    categoria = Column(String(100), nullable=False, index=True)
    color = Column(String(50), nullable=True)
    size = Column(String(50), nullable=True)
    tipo_etiqueta = Column(String(20), nullable=False)
    codigo_barras = Column(String(100), nullable=True)
    imagen_url = Column(String(1024), nullable=True)
    activo = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
