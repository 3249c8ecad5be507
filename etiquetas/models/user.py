"""ORM model for staff users (auth and RBAC)."""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Uuid, func, true
from sqlalchemy.orm import relationship

from etiquetas.models.base import Base
from etiquetas.models.role import Role


class User(Base):
    """
    Staff account for JWT authentication and role-based access control.

    Never hard-deleted: deactivation sets activo=False. uuid is the opaque
    external identifier; id stays internal.
    """

    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(Uuid, nullable=False, unique=True, default=uuid4)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    nombre = Column(String(100), nullable=False)
    apellido = Column(String(100), nullable=False)
    rol_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    activo = Column(Boolean, nullable=False, default=True, server_default=true())
    ultimo_acceso = Column(DateTime(timezone=True), nullable=True)
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

    role = relationship(Role, lazy="joined")

    @property
    def rol(self) -> str:
        """Role name, e.g. 'Administrador'."""
        return self.role.nombre

    @property
    def nombre_completo(self) -> str:
        return f"{self.nombre} {self.apellido}"
