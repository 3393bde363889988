"""Tests for the storage layer repository implementations."""

import pytest

from models import SessionResult
from storage import (
    SQLiteAttemptRepository,
    SQLiteSessionStore,
    StorageError,
    get_attempt_repo,
    get_connection,
    get_session_store,
    init_schema,
)


def make_result(score: float, seconds: int, **data) -> SessionResult:
    return SessionResult(
        score_percentage=score, time_taken_seconds=seconds, attempt_data=data
    )


class TestSchema:
    """Tests for schema initialization."""

    def test_creates_tables(self, test_db_path):
        conn = get_connection(test_db_path)
        try:
            names = {
                row["name"]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        finally:
            conn.close()
        assert {"session_progress", "game_attempts"} <= names

    def test_is_idempotent(self, test_db_path):
        """Should be safe to run on an existing database."""
        init_schema(test_db_path)
        init_schema(test_db_path)

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "games.db"
        init_schema(db_path)
        assert db_path.exists()


class TestSQLiteSessionStore:
    """Tests for SQLiteSessionStore."""

    def test_load_missing_returns_none(self, test_db_path):
        store = SQLiteSessionStore(test_db_path)
        assert store.load("nope") is None

    def test_save_and_load(self, test_db_path):
        store = SQLiteSessionStore(test_db_path)
        store.save("k", '{"cursor": 1}')
        assert store.load("k") == '{"cursor": 1}'

    def test_save_replaces(self, test_db_path):
        store = SQLiteSessionStore(test_db_path)
        store.save("k", "one")
        store.save("k", "two")
        assert store.load("k") == "two"

    def test_delete(self, test_db_path):
        store = SQLiteSessionStore(test_db_path)
        store.save("a", "1")
        store.save("b", "2")
        store.delete("a")
        store.delete("missing")
        assert store.load("a") is None
        assert store.load("b") == "2"

    def test_errors_wrapped(self, tmp_path):
        """Should raise StorageError rather than sqlite3 errors."""
        store = SQLiteSessionStore(tmp_path)
        with pytest.raises(StorageError):
            store.save("k", "v")
        with pytest.raises(StorageError):
            store.load("k")

    def test_factory(self, test_db_path):
        assert isinstance(get_session_store(test_db_path), SQLiteSessionStore)


class TestSQLiteAttemptRepository:
    """Tests for SQLiteAttemptRepository."""

    def test_record_and_list(self, test_db_path, pairs_definition):
        repo = SQLiteAttemptRepository(test_db_path)
        attempt = repo.record(
            pairs_definition, make_result(100, 12, moves=3, pairs=2, perfectGame=False)
        )
        assert attempt.id.startswith("attempt_")

        attempts = repo.list_attempts()
        assert len(attempts) == 1
        loaded = attempts[0]
        assert loaded.id == attempt.id
        assert loaded.game_type == pairs_definition.game_type
        assert loaded.game_name == "Capitals"
        assert loaded.game_id == "pairs-1"
        assert loaded.score_percentage == 100
        assert loaded.time_taken_seconds == 12
        assert loaded.attempt_data == {"moves": 3, "pairs": 2, "perfectGame": False}

    def test_game_without_id(self, test_db_path, splat_definition):
        repo = SQLiteAttemptRepository(test_db_path)
        repo.record(splat_definition, make_result(50, 3))
        assert repo.list_attempts()[0].game_id is None

    def test_filter_by_game(self, test_db_path, pairs_definition, swipe_definition):
        repo = SQLiteAttemptRepository(test_db_path)
        repo.record(pairs_definition, make_result(100, 5))
        repo.record(swipe_definition, make_result(66.7, 8))
        repo.record(swipe_definition, make_result(100, 9))

        assert len(repo.list_attempts()) == 3
        swipes = repo.list_attempts("Science Facts")
        assert len(swipes) == 2
        assert all(a.game_name == "Science Facts" for a in swipes)
        assert repo.list_attempts("Unknown") == []

    def test_best_attempt_prefers_score_then_time(self, test_db_path, swipe_definition):
        repo = SQLiteAttemptRepository(test_db_path)
        repo.record(swipe_definition, make_result(50, 10))
        repo.record(swipe_definition, make_result(80, 30))
        repo.record(swipe_definition, make_result(80, 20))

        best = repo.best_attempt("Science Facts")
        assert best.score_percentage == 80
        assert best.time_taken_seconds == 20

    def test_best_attempt_none(self, test_db_path):
        assert SQLiteAttemptRepository(test_db_path).best_attempt("x") is None

    def test_errors_wrapped(self, tmp_path, pairs_definition):
        repo = SQLiteAttemptRepository(tmp_path)
        with pytest.raises(StorageError):
            repo.record(pairs_definition, make_result(100, 1))

    def test_factory(self, test_db_path):
        assert isinstance(get_attempt_repo(test_db_path), SQLiteAttemptRepository)
