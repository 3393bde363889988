"""Shared pytest fixtures for the learning games test suite."""

import json
import random
import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from engine import Scheduler
from models import (
    FlashcardsDefinition,
    PairsDefinition,
    SplatDefinition,
    SwipeDefinition,
)
from storage import init_schema
from storage.base import SessionStore, StorageError


class MemoryStore(SessionStore):
    """Dict-backed session store that counts writes."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.saves = 0

    def load(self, key: str) -> str | None:
        return self.data.get(key)

    def save(self, key: str, payload: str) -> None:
        self.saves += 1
        self.data[key] = payload

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FailingStore(MemoryStore):
    """Session store whose writes always fail."""

    def save(self, key: str, payload: str) -> None:
        raise StorageError("disk full")


class FakeClock:
    """Manually advanced clock standing in for wall time in the terminal player."""

    def __init__(self, start: float = 1000.0):
        self.time = start

    def now(self) -> float:
        return self.time

    def sleep(self, seconds: float) -> None:
        self.time += seconds


@pytest.fixture
def pairs_definition() -> PairsDefinition:
    """A two-pair matching game."""
    return PairsDefinition.model_validate(
        {
            "name": "Capitals",
            "id": "pairs-1",
            "items": [
                {"id": "a", "leftText": "France", "rightText": "Paris"},
                {"id": "b", "leftText": "Japan", "rightText": "Tokyo"},
            ],
        }
    )


@pytest.fixture
def flashcards_definition() -> FlashcardsDefinition:
    """A three-card flashcard set."""
    return FlashcardsDefinition.model_validate(
        {
            "name": "Spanish Basics",
            "id": "deck-1",
            "cards": [
                {"id": "c1", "front": "hola", "back": "hello"},
                {"id": "c2", "front": "adiós", "back": "goodbye"},
                {"id": "c3", "front": "gracias", "back": "thank you"},
            ],
        }
    )


@pytest.fixture
def splat_definition() -> SplatDefinition:
    """A three-question timed-reaction game with the default time limit."""
    return SplatDefinition.model_validate(
        {
            "name": "Quick Math",
            "items": [
                {"id": "q1", "question": "2 + 2", "answer": "4"},
                {"id": "q2", "question": "3 + 3", "answer": "6"},
                {"id": "q3", "question": "4 + 4", "answer": "8"},
            ],
        }
    )


@pytest.fixture
def swipe_definition() -> SwipeDefinition:
    """A three-statement true/false game."""
    return SwipeDefinition.model_validate(
        {
            "name": "Science Facts",
            "items": [
                {"id": "s1", "statement": "Water boils at 100°C", "isCorrect": True},
                {
                    "id": "s2",
                    "statement": "The sun orbits the earth",
                    "isCorrect": False,
                    "explanation": "The earth orbits the sun.",
                },
                {"id": "s3", "statement": "Bats are mammals", "isCorrect": True},
            ],
        }
    )


@pytest.fixture
def scheduler() -> Scheduler:
    return Scheduler()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for deterministic shuffles."""
    return random.Random(42)


@pytest.fixture
def results() -> list:
    """Collects every result emitted by a controller."""
    return []


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_games.db"
    init_schema(db_path)
    return db_path


@pytest.fixture
def write_game(tmp_path):
    """Write a game JSON file in the stored-game shape and return its path."""

    def writer(game_type: str, name: str, game_data: dict, game_id=None) -> Path:
        path = tmp_path / f"{game_type}.json"
        payload = {"gameType": game_type, "name": name, "gameData": game_data}
        if game_id is not None:
            payload["id"] = game_id
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return writer
