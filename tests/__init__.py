"""Test-suite package. Points the app at SQLite before any etiquetas module is imported."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_CHECK_ON_STARTUP", "false")
os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("JWT_SECRET", "test-secret")
