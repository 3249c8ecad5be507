"""Tests for the create_user CLI against an in-memory database."""

import unittest
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from etiquetas.core.security import verify_password
from etiquetas.models import Base, Role, User
from etiquetas.scripts.create_user import main


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        patcher = patch("etiquetas.scripts.create_user.SessionLocal", self.SessionTesting)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.engine.dispose)

    def test_seeds_roles_and_creates_admin(self) -> None:
        code = main(["admin", "clave-segura", "admin@foamy.mx", "Ana", "Pérez"])
        self.assertEqual(code, 0)
        with self.SessionTesting() as db:
            roles = sorted(r.nombre for r in db.query(Role).all())
            self.assertEqual(roles, ["Administrador", "Operador", "Supervisor"])
            user = db.query(User).filter(User.username == "admin").one()
            self.assertEqual(user.rol, "Administrador")
            self.assertTrue(verify_password("clave-segura", user.password_hash))

    def test_existing_username_is_refused(self) -> None:
        self.assertEqual(
            main(["ana", "clave-segura", "ana@foamy.mx", "Ana", "Pérez", "Operador"]), 0
        )
        self.assertEqual(
            main(["ana", "otra-clave", "otra@foamy.mx", "Ana", "Pérez", "Operador"]), 1
        )

    def test_short_password_is_refused(self) -> None:
        self.assertEqual(main(["ana", "abc", "ana@foamy.mx", "Ana", "Pérez"]), 1)
