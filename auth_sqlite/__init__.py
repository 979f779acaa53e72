"""SQLite persistence adapter for an auth framework's user/session/account/token model."""
from __future__ import annotations

from .adapter import Adapter, SQLiteAdapter, sqlite_adapter
from .db import Database, get_env_connection_string
from .formatting import insertable_from_object, object_from_row
from .migrations import down, up

__all__ = [
    "Adapter",
    "Database",
    "SQLiteAdapter",
    "down",
    "get_env_connection_string",
    "insertable_from_object",
    "object_from_row",
    "sqlite_adapter",
    "up",
]

__version__ = "0.1.0"
