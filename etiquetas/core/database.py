"""Database engine, per-request sessions and transaction helpers."""

import logging
import threading
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from etiquetas.core.config import settings
from etiquetas.core.exceptions import ConflictError, InternalError

logger = logging.getLogger(__name__)

HOLD_TIMEOUT_MESSAGE = "La operación excedió el tiempo máximo de transacción"


def _engine_options(url: str) -> dict[str, Any]:
    """Pool sizing only applies to server databases; SQLite uses its default pool."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": 0,
        "pool_timeout": settings.DB_POOL_TIMEOUT_SEC,
        "pool_recycle": settings.DB_POOL_RECYCLE_SEC,
    }


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(target: Engine) -> None:
    """Replace SQLite's ASCII-only lower() so LOWER(col) LIKE also matches non-ASCII letters."""

    @event.listens_for(target, "connect")
    def _set_sqlite_functions(dbapi_conn, connection_record):
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
    **_engine_options(settings.DATABASE_URL),
)
if engine.dialect.name == "sqlite":
    register_sqlite_functions(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.warning("Database connectivity check failed", exc_info=True)
        return False


def _hold_expired(expired: threading.Event, held_for: float) -> None:
    logger.error(
        "Database session held for more than %.1fs inside a transaction; it will be rolled back",
        held_for,
    )
    expired.set()


@contextmanager
def transaction(
    db: Session,
    conflict_message: str | None = None,
    hold_timeout: float | None = None,
) -> Iterator[Session]:
    """
    Group statements into one unit of work: commit on success, roll back on any error.

    A unique-constraint violation raised by the store becomes ConflictError(conflict_message)
    when a message is given. A block that runs longer than hold_timeout
    (DB_CONNECTION_HOLD_TIMEOUT_SEC by default) is rolled back and reported as
    InternalError instead of being committed. The watchdog thread only raises a flag;
    the session itself is touched only from the calling thread.
    """
    timeout = hold_timeout or settings.DB_CONNECTION_HOLD_TIMEOUT_SEC
    expired = threading.Event()
    watchdog = threading.Timer(timeout, _hold_expired, args=(expired, timeout))
    watchdog.daemon = True
    watchdog.start()
    try:
        yield db
        watchdog.cancel()
        if expired.is_set():
            raise InternalError(HOLD_TIMEOUT_MESSAGE)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Transaction rolled back on integrity error: %s", e.orig)
        if conflict_message is not None:
            raise ConflictError(conflict_message) from e
        raise
    except Exception as e:
        db.rollback()
        logger.error("Transaction rolled back: %s", e)
        raise
    finally:
        watchdog.cancel()


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Convert unexpected store failures into InternalError(message)."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception(message)
        raise InternalError(message) from e
