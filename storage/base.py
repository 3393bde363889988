"""Abstract repository interfaces for the storage layer."""

from abc import ABC, abstractmethod

from models import AttemptRecord, GameDefinition, SessionResult


class StorageError(Exception):
    """Raised when the underlying store cannot be read or written."""


class SessionStore(ABC):
    """Abstract interface for durable, keyed storage of in-progress sessions."""

    @abstractmethod
    def load(self, key: str) -> str | None:
        """Load the serialized session stored under a key.

        Args:
            key: The session key.

        Returns:
            The stored JSON payload, or None if nothing is stored.
        """
        pass

    @abstractmethod
    def save(self, key: str, payload: str) -> None:
        """Save/replace the serialized session under a key.

        Args:
            key: The session key.
            payload: JSON payload to store.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete the session stored under a key, if any.

        Args:
            key: The session key.
        """
        pass


class AttemptRepository(ABC):
    """Abstract interface for recording completed game sessions."""

    @abstractmethod
    def record(self, game: GameDefinition, result: SessionResult) -> AttemptRecord:
        """Store the result of a completed session.

        Args:
            game: The definition the session was played from.
            result: The session's normalized result.

        Returns:
            The stored attempt.
        """
        pass

    @abstractmethod
    def list_attempts(self, game_name: str | None = None) -> list[AttemptRecord]:
        """Load recorded attempts, newest first.

        Args:
            game_name: If provided, only attempts at the game with this name.

        Returns:
            List of attempts.
        """
        pass

    @abstractmethod
    def best_attempt(self, game_name: str) -> AttemptRecord | None:
        """Get the highest-scoring attempt at a game (fastest on ties).

        Args:
            game_name: The game's display name.

        Returns:
            The best attempt, or None if the game was never completed.
        """
        pass
