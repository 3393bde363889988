"""SQLite implementations of repository interfaces."""

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path

from .base import AttemptRepository, SessionStore, StorageError
from .connection import get_connection, DEFAULT_DB_PATH
from models import AttemptRecord, GameDefinition, GameType, SessionResult


class SQLiteSessionStore(SessionStore):
    """SQLite implementation of SessionStore."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def load(self, key: str) -> str | None:
        """Load the serialized session stored under a key."""
        try:
            conn = get_connection(self.db_path)
            try:
                cursor = conn.execute(
                    "SELECT payload FROM session_progress WHERE key = ?", (key,)
                )
                row = cursor.fetchone()
                return row["payload"] if row else None
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot load session {key}: {e}") from e

    def save(self, key: str, payload: str) -> None:
        """Save/replace the serialized session under a key."""
        try:
            conn = get_connection(self.db_path)
            try:
                conn.execute(
                    """INSERT OR REPLACE INTO session_progress (key, payload, saved_at)
                    VALUES (?, ?, ?)""",
                    (key, payload, datetime.now(timezone.utc).isoformat()),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot save session {key}: {e}") from e

    def delete(self, key: str) -> None:
        """Delete the session stored under a key, if any."""
        try:
            conn = get_connection(self.db_path)
            try:
                conn.execute("DELETE FROM session_progress WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot delete session {key}: {e}") from e


class SQLiteAttemptRepository(AttemptRepository):
    """SQLite implementation of AttemptRepository."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = db_path

    def record(self, game: GameDefinition, result: SessionResult) -> AttemptRecord:
        """Store the result of a completed session."""
        attempt = AttemptRecord(
            id=f"attempt_{uuid.uuid4().hex}",
            game_type=game.game_type,
            game_name=game.name,
            game_id=game.id,
            score_percentage=result.score_percentage,
            time_taken_seconds=result.time_taken_seconds,
            attempt_data=result.attempt_data,
            completed_at=datetime.now(timezone.utc),
        )
        try:
            conn = get_connection(self.db_path)
            try:
                conn.execute(
                    """INSERT INTO game_attempts
                    (id, game_type, game_name, game_id, score_percentage,
                     time_taken_seconds, attempt_data, completed_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        attempt.id,
                        attempt.game_type.value,
                        attempt.game_name,
                        attempt.game_id,
                        attempt.score_percentage,
                        attempt.time_taken_seconds,
                        json.dumps(attempt.attempt_data),
                        attempt.completed_at.isoformat(),
                    ),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot record attempt at {game.name!r}: {e}") from e
        return attempt

    def list_attempts(self, game_name: str | None = None) -> list[AttemptRecord]:
        """Load recorded attempts, newest first."""
        sql = "SELECT * FROM game_attempts"
        params: tuple = ()
        if game_name is not None:
            sql += " WHERE game_name = ?"
            params = (game_name,)
        sql += " ORDER BY completed_at DESC"

        try:
            conn = get_connection(self.db_path)
            try:
                cursor = conn.execute(sql, params)
                return [self._row_to_model(row) for row in cursor.fetchall()]
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot list attempts: {e}") from e

    def best_attempt(self, game_name: str) -> AttemptRecord | None:
        """Get the highest-scoring attempt at a game (fastest on ties)."""
        try:
            conn = get_connection(self.db_path)
            try:
                cursor = conn.execute(
                    """SELECT * FROM game_attempts WHERE game_name = ?
                    ORDER BY score_percentage DESC, time_taken_seconds ASC
                    LIMIT 1""",
                    (game_name,),
                )
                row = cursor.fetchone()
                return self._row_to_model(row) if row else None
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot load best attempt: {e}") from e

    def _row_to_model(self, row) -> AttemptRecord:
        """Convert a database row to an AttemptRecord model."""
        return AttemptRecord(
            id=row["id"],
            game_type=GameType(row["game_type"]),
            game_name=row["game_name"],
            game_id=row["game_id"],
            score_percentage=row["score_percentage"],
            time_taken_seconds=row["time_taken_seconds"],
            attempt_data=json.loads(row["attempt_data"]),
            completed_at=datetime.fromisoformat(row["completed_at"]),
        )
