"""Shared base class for API tests: fresh in-memory SQLite per test, seeded roles and users."""

import unittest
from collections.abc import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from etiquetas.core.database import get_db, register_sqlite_functions
from etiquetas.core.security import create_access_token, hash_password
from etiquetas.main import app
from etiquetas.models import Article, Base, Role, RoleName, User

PASSWORD = "secreto123"

# (username, role, activo)
SEED_USERS = (
    ("admin", RoleName.ADMIN, True),
    ("supervisor", RoleName.SUPERVISOR, True),
    ("operador", RoleName.OPERATOR, True),
    ("inactivo", RoleName.OPERATOR, False),
)

_password_hash: str | None = None


def seeded_password_hash() -> str:
    """bcrypt is slow on purpose; hash the shared test password once per run."""
    global _password_hash
    if _password_hash is None:
        _password_hash = hash_password(PASSWORD)
    return _password_hash


class ApiTestCase(unittest.TestCase):
    """Runs the real app against an isolated database through FastAPI's TestClient."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        register_sqlite_functions(self.engine)
        Base.metadata.create_all(self.engine)
        self.SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.role_ids: dict[RoleName, int] = {}
        self.user_ids: dict[str, int] = {}
        self._seed()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.engine.dispose()

    def _seed(self) -> None:
        with self.SessionTesting() as db:
            for name in RoleName:
                role = Role(nombre=name.value)
                db.add(role)
                db.flush()
                self.role_ids[name] = role.id
            for username, role_name, activo in SEED_USERS:
                user = User(
                    username=username,
                    email=f"{username}@foamy.mx",
                    nombre=username.capitalize(),
                    apellido="Prueba",
                    rol_id=self.role_ids[role_name],
                    password_hash=seeded_password_hash(),
                    activo=activo,
                )
                db.add(user)
                db.flush()
                self.user_ids[username] = user.id
            db.commit()

    def headers_for(self, username: str) -> dict[str, str]:
        """Authorization header for a seeded user, without going through /login."""
        role = next(r for u, r, _ in SEED_USERS if u == username)
        token = create_access_token(self.user_ids[username], username, role.value)
        return {"Authorization": f"Bearer {token}"}

    def add_article(self, sku: str, **fields) -> int:
        """Insert an article directly and return its id."""
        values = {
            "descripcion": f"Artículo {sku}",
            "categoria": "general",
            "tipo_etiqueta": "qr",
            "activo": True,
        }
        values.update(fields)
        with self.SessionTesting() as db:
            article = Article(sku=sku, **values)
            db.add(article)
            db.commit()
            return article.id
