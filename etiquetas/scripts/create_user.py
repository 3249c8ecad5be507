"""
Create a user (e.g. the first administrator). Run from project root:
  python -m etiquetas.scripts.create_user USERNAME PASSWORD EMAIL NOMBRE APELLIDO [role]
Example:
  python -m etiquetas.scripts.create_user admin your-secure-password admin@example.com Ana Pérez Administrador

Roles missing from the database are created first, so this also works on an empty schema.
"""
import argparse
import logging
import sys

from sqlalchemy.orm import Session

from etiquetas.core.config import get_settings
from etiquetas.core.database import SessionLocal
from etiquetas.core.logging_config import configure_logging
from etiquetas.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, hash_password
from etiquetas.models import Role, RoleName, User

logger = logging.getLogger(__name__)


def ensure_roles(db: Session) -> dict[str, Role]:
    """Insert any RoleName not yet present; return all roles keyed by name."""
    roles = {role.nombre: role for role in db.query(Role).all()}
    for name in RoleName:
        if name.value not in roles:
            role = Role(nombre=name.value)
            db.add(role)
            roles[name.value] = role
            logger.info("Seeded role %s", name.value)
    db.flush()
    return roles


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user for the label management API.")
    parser.add_argument("username", help="Username (1-50 chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("nombre", help="First name")
    parser.add_argument("apellido", help="Last name")
    parser.add_argument(
        "role",
        nargs="?",
        default=RoleName.ADMIN.value,
        choices=[name.value for name in RoleName],
    )
    args = parser.parse_args(argv)
    configure_logging(get_settings().LOG_LEVEL)

    username = args.username.strip()
    if not username or len(username) > 50:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        existing = (
            db.query(User)
            .filter((User.username == username) | (User.email == args.email))
            .first()
        )
        if existing:
            print(f"Username '{username}' or email '{args.email}' already in use.", file=sys.stderr)
            return 1
        roles = ensure_roles(db)
        user = User(
            username=username,
            email=args.email,
            nombre=args.nombre,
            apellido=args.apellido,
            rol_id=roles[args.role].id,
            password_hash=hash_password(args.password),
            activo=True,
        )
        db.add(user)
        db.commit()
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
