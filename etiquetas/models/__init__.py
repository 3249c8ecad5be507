"""SQLAlchemy ORM models."""

from etiquetas.models.article import Article, LabelType
from etiquetas.models.base import Base
from etiquetas.models.role import Role, RoleName
from etiquetas.models.user import User

__all__ = ["Article", "Base", "LabelType", "Role", "RoleName", "User"]
