"""Core app configuration, database access and error taxonomy."""

from etiquetas.core.config import get_settings, settings
from etiquetas.core.database import get_db, store_errors, transaction

__all__ = ["get_settings", "settings", "get_db", "store_errors", "transaction"]
