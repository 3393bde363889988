"""Flashcard self-assessment session with resumable progress.

The player flips each card, then grades their own recall as known or not
known. Grading auto-advances to the next ungraded card after a short delay
and the session completes once every card is graded. While running, the
session is saved to a ``SessionStore`` after every change so a reload can
pick up where it left off.
"""

import logging
import re
from datetime import datetime, timezone

from pydantic import ValidationError

from engine.base import SessionController
from engine.clock import ScheduledTask
from engine.config import FlashcardsConfig
from engine.results import normalize_result, percentage
from engine.shuffle import shuffle
from models import (
    CardProgress,
    FlashcardItem,
    FlashcardProgressRecord,
    FlashcardsDefinition,
    FlashcardsState,
    GameType,
    SessionResult,
    SessionStatus,
)
from storage.base import SessionStore, StorageError

logger = logging.getLogger(__name__)

_UNREAD = object()


def progress_key(definition: FlashcardsDefinition, prefix: str) -> str:
    """Store key for a flashcard set's saved session.

    Uses the definition's stable id when it has one. Sets without an id fall
    back to the display name with whitespace replaced by underscores.
    """
    if definition.id:
        return f"{prefix}{definition.id}"
    return prefix + re.sub(r"\s", "_", definition.name)


def fresh_progress(cards: list[FlashcardItem]) -> list[CardProgress]:
    return [CardProgress(card_id=card.id) for card in cards]


def turn_card(state: FlashcardsState) -> FlashcardsState | None:
    """Toggle which face of the current card is shown, marking it viewed."""
    if state.status != SessionStatus.RUNNING:
        return None
    new_state = state.model_copy(deep=True)
    new_state.current_progress.viewed = True
    new_state.showing_back = not state.showing_back
    return new_state


def move_cursor(state: FlashcardsState, step: int) -> FlashcardsState | None:
    """Move to a neighbouring card, staying within the deck."""
    if state.status != SessionStatus.RUNNING:
        return None
    target = state.cursor + step
    if target < 0 or target >= len(state.cards):
        return None
    new_state = state.model_copy(deep=True)
    new_state.cursor = target
    new_state.showing_back = False
    return new_state


def assess_card(state: FlashcardsState, known: bool) -> FlashcardsState | None:
    """Grade the current card. Only allowed on its back face, and only once."""
    if state.status != SessionStatus.RUNNING:
        return None
    if not state.showing_back or state.current_progress.known is not None:
        return None
    new_state = state.model_copy(deep=True)
    new_state.current_progress.known = known
    new_state.current_progress.viewed = True
    return new_state


def next_unassessed(state: FlashcardsState) -> int | None:
    """Index of the next ungraded card after the cursor, wrapping around."""
    total = len(state.cards)
    for offset in range(1, total + 1):
        index = (state.cursor + offset) % total
        if state.progress[index].known is None:
            return index
    return None


def advance_to_unassessed(state: FlashcardsState) -> FlashcardsState:
    target = next_unassessed(state)
    if target is None or target == state.cursor:
        return state
    new_state = state.model_copy(deep=True)
    new_state.cursor = target
    new_state.showing_back = False
    return new_state


class FlashcardsController(SessionController[FlashcardsDefinition, FlashcardsState]):
    """Controller for flashcard self-assessment sessions."""

    game_type = GameType.FLASHCARDS

    def __init__(
        self,
        definition: FlashcardsDefinition,
        *,
        store: SessionStore | None = None,
        shuffle_cards: bool = False,
        config: FlashcardsConfig | None = None,
        **kwargs,
    ):
        super().__init__(definition, **kwargs)
        self.store = store
        self.shuffle_cards = shuffle_cards
        self.config = config or FlashcardsConfig()
        self._saved = _UNREAD
        self._advance_task: ScheduledTask | None = None

    @property
    def storage_key(self) -> str:
        return progress_key(self.definition, self.config.storage_key_prefix)

    def empty_state(self) -> FlashcardsState:
        return FlashcardsState()

    def new_state(self, shuffled: bool | None = None) -> FlashcardsState:
        if shuffled is None:
            shuffled = self.shuffle_cards
        cards = list(self.definition.cards)
        if shuffled:
            cards = shuffle(cards, self.rng)
        return FlashcardsState(
            cards=cards, progress=fresh_progress(cards), shuffled=shuffled
        )

    # ------------------------------------------------------------------
    # Resumption
    # ------------------------------------------------------------------

    def saved_progress(self) -> FlashcardProgressRecord | None:
        """The resumable saved session for this set, if there is a usable one.

        The store is read once; corrupted or mismatched records are discarded.
        """
        if self._saved is _UNREAD:
            self._saved = self._read_saved()
        return self._saved

    def _read_saved(self) -> FlashcardProgressRecord | None:
        if self.store is None:
            return None
        key = self.storage_key
        try:
            payload = self.store.load(key)
        except StorageError as e:
            logger.warning("Could not read saved flashcard session %s: %s", key, e)
            return None
        if payload is None:
            return None

        try:
            record = FlashcardProgressRecord.model_validate_json(payload)
        except ValidationError as e:
            logger.warning(
                "Discarding corrupted flashcard session %s: %d error(s)",
                key,
                e.error_count(),
            )
            self._clear_saved()
            return None

        if not self._matches_definition(record):
            logger.warning(
                "Discarding flashcard session %s: it does not match the card set", key
            )
            self._clear_saved()
            return None
        return record

    def _matches_definition(self, record: FlashcardProgressRecord) -> bool:
        card_ids = [card.id for card in record.cards]
        if sorted(card_ids) != sorted(card.id for card in self.definition.cards):
            return False
        if [p.card_id for p in record.progress] != card_ids:
            return False
        if record.cursor >= len(record.cards):
            return False
        # A fully graded deck should have been purged at completion
        return any(p.known is None for p in record.progress)

    def _restore(self, record: FlashcardProgressRecord) -> FlashcardsState:
        return FlashcardsState(
            cards=list(record.cards),
            progress=[p.model_copy() for p in record.progress],
            cursor=record.cursor,
            elapsed_seconds=record.elapsed_seconds,
            shuffled=record.shuffled,
        )

    def to_record(self) -> FlashcardProgressRecord:
        return FlashcardProgressRecord(
            cards=list(self.state.cards),
            cursor=self.state.cursor,
            progress=[p.model_copy() for p in self.state.progress],
            elapsed_seconds=self.state.elapsed_seconds,
            shuffled=self.state.shuffled,
            last_saved=datetime.now(timezone.utc),
        )

    def _persist(self) -> None:
        if self.store is None or self.state.review_mode or not self.is_running:
            return
        key = self.storage_key
        try:
            self.store.save(key, self.to_record().model_dump_json())
        except StorageError as e:
            logger.warning("Failed to save flashcard progress %s: %s", key, e)

    def _clear_saved(self) -> None:
        self._saved = None
        if self.store is None:
            return
        try:
            self.store.delete(self.storage_key)
        except StorageError as e:
            logger.warning(
                "Failed to clear flashcard progress %s: %s", self.storage_key, e
            )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, resume: bool = True) -> None:
        """Start the session, resuming the saved one unless ``resume`` is False.

        Raises:
            ContentLoadError: If the definition cannot be played.
        """
        if self.state.status != SessionStatus.NOT_STARTED or self.exited:
            return
        self.validate()

        record = self.saved_progress() if resume else None
        if record is None:
            self._clear_saved()
            self.begin(self.new_state())
        else:
            logger.info("Resuming flashcard session %s", self.storage_key)
            self.begin(self._restore(record))
        self._persist()

    def restart(self) -> bool:
        """Start over with the same ordering mode, dropping saved progress."""
        if self.state.status == SessionStatus.NOT_STARTED or self.exited:
            return False
        self._clear_saved()
        self.begin(self.new_state(self.state.shuffled))
        self._persist()
        return True

    def shuffle_restart(self) -> bool:
        """Shuffle the deck and start over. Only allowed before any card is graded.

        The caller is expected to confirm with the player first.
        """
        if (
            not self.is_running
            or self.state.assessed_count > 0
            or self.state.review_mode
        ):
            return False
        self._clear_saved()
        self.begin(self.new_state(shuffled=True))
        self._persist()
        return True

    def review_unknown(self) -> bool:
        """Start a review round with only the cards graded as not known.

        The round has fresh grades and a reset clock, and is not saved.
        """
        if self.state.status != SessionStatus.COMPLETED or self.exited:
            return False
        unknown = [
            card
            for card, p in zip(self.state.cards, self.state.progress)
            if p.known is False
        ]
        if not unknown:
            return False
        self.begin(
            FlashcardsState(
                cards=unknown,
                progress=fresh_progress(unknown),
                shuffled=self.state.shuffled,
                review_mode=True,
            )
        )
        return True

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def flip(self) -> bool:
        return self._apply(turn_card(self.state) if self.is_running else None)

    def next(self) -> bool:
        return self._apply(move_cursor(self.state, 1) if self.is_running else None)

    def previous(self) -> bool:
        return self._apply(move_cursor(self.state, -1) if self.is_running else None)

    def assess(self, known: bool) -> bool:
        """Grade the current card as known or not known."""
        if not self.is_running:
            return False
        new_state = assess_card(self.state, known)
        if new_state is None:
            return False

        self.state = new_state
        if self.state.all_assessed:
            self.complete()
            return True

        if self._advance_task is not None:
            self._advance_task.cancel()
        self._advance_task = self.schedule(self.config.advance_delay, self._advance)
        self._persist()
        return True

    def _apply(self, new_state: FlashcardsState | None) -> bool:
        if new_state is None:
            return False
        self.state = new_state
        self._persist()
        return True

    def _advance(self) -> None:
        self._advance_task = None
        self.state = advance_to_unassessed(self.state)
        self._persist()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def on_tick(self) -> None:
        super().on_tick()
        self._persist()

    def on_completed(self) -> None:
        self._advance_task = None
        self._clear_saved()

    def build_result(self) -> SessionResult:
        total = len(self.state.cards)
        known = self.state.known_count
        attempt_data = {
            "totalCards": total,
            "knownCards": known,
            "unknownCards": self.state.unknown_count,
            "reviewedAll": self.state.all_assessed,
        }
        if self.state.review_mode:
            attempt_data["reviewMode"] = True
        return normalize_result(
            percentage(known, total), self.state.elapsed_seconds, attempt_data
        )
