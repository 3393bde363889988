"""Storage layer for the learning games.

Provides repository interfaces and SQLite implementations for persisting
resumable sessions and recording completed attempts.
"""

from pathlib import Path

from .base import AttemptRepository, SessionStore, StorageError
from .sqlite import SQLiteAttemptRepository, SQLiteSessionStore
from .connection import get_connection, init_schema, DEFAULT_DB_PATH

__all__ = [
    # Abstract interfaces
    "SessionStore",
    "AttemptRepository",
    "StorageError",
    # SQLite implementations
    "SQLiteSessionStore",
    "SQLiteAttemptRepository",
    # Connection utilities
    "get_connection",
    "init_schema",
    "DEFAULT_DB_PATH",
    # Factory functions
    "get_session_store",
    "get_attempt_repo",
]


def get_session_store(db_path: Path = DEFAULT_DB_PATH) -> SessionStore:
    """Get a SessionStore instance."""
    return SQLiteSessionStore(db_path)


def get_attempt_repo(db_path: Path = DEFAULT_DB_PATH) -> AttemptRepository:
    """Get an AttemptRepository instance."""
    return SQLiteAttemptRepository(db_path)
