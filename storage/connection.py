"""Database connection management and schema initialization."""

import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "games.db"

SCHEMA_SQL = """
-- In-progress sessions that can be resumed (flashcards)
CREATE TABLE IF NOT EXISTS session_progress (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL,  -- JSON snapshot of the session
    saved_at TEXT NOT NULL
);

-- Completed game sessions
CREATE TABLE IF NOT EXISTS game_attempts (
    id TEXT PRIMARY KEY,
    game_type TEXT NOT NULL CHECK (game_type IN ('pairs', 'flashcards', 'splat', 'swipe')),
    game_name TEXT NOT NULL,
    game_id TEXT,
    score_percentage REAL NOT NULL CHECK (score_percentage BETWEEN 0 AND 100),
    time_taken_seconds INTEGER NOT NULL CHECK (time_taken_seconds >= 0),
    attempt_data TEXT NOT NULL DEFAULT '{}',  -- JSON object
    completed_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_game_attempts_name ON game_attempts(game_name);
"""


def get_connection(db_path: Path = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Get a database connection with appropriate settings.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A configured sqlite3 Connection object.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    """Initialize the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    # Ensure the parent directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()
