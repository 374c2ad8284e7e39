"""
Shared pytest setup.

Settings are read at import time, so the database URL is pointed at an
in-memory SQLite database before any asset_tracker module is imported.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
