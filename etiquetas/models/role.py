"""ORM model for roles (named permission buckets referenced by users)."""

from enum import Enum

from sqlalchemy import Column, Integer, String

from etiquetas.models.base import Base


class RoleName(str, Enum):
    """Closed set of role names used in role allow-lists."""

    ADMIN = "Administrador"
    SUPERVISOR = "Supervisor"
    OPERATOR = "Operador"


class Role(Base):
    """Role seeded by migration; there is no CRUD for roles."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(50), nullable=False, unique=True)
