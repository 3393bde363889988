import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)


class GameType(str, Enum):
    PAIRS = "pairs"
    FLASHCARDS = "flashcards"
    SPLAT = "splat"
    SWIPE = "swipe"


class ContentLoadError(ValueError):
    """Raised when a game definition cannot be loaded into a session."""


# ============================================================================
# Content Models
# ============================================================================


class ContentModel(BaseModel):
    """Immutable authored content. Accepts camelCase keys from stored game data."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class PairsItem(ContentModel):
    id: str = Field(min_length=1)
    left_text: str = Field(alias="leftText", min_length=1)
    left_image: str | None = Field(default=None, alias="leftImage")
    right_text: str = Field(alias="rightText", min_length=1)
    right_image: str | None = Field(default=None, alias="rightImage")


class FlashcardItem(ContentModel):
    id: str = Field(min_length=1)
    front: str = Field(min_length=1)
    front_image: str | None = Field(default=None, alias="frontImage")
    back: str = Field(min_length=1)
    back_image: str | None = Field(default=None, alias="backImage")


class SplatItem(ContentModel):
    id: str = Field(min_length=1)
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    image: str | None = None


class SwipeItem(ContentModel):
    id: str = Field(min_length=1)
    statement: str = Field(min_length=1)
    is_correct: bool = Field(alias="isCorrect")
    image: str | None = None
    explanation: str | None = None


class GameDefinition(ContentModel):
    """Base class for the type-tagged game content supplied once per session."""

    game_type: ClassVar[GameType]
    # Name of the list field holding the ordered content items
    entries_field: ClassVar[str] = "items"

    name: str = Field(min_length=1)
    id: str | None = None
    description: str | None = None

    @property
    def entries(self) -> list:
        """The ordered content items, whatever the game calls them."""
        return getattr(self, self.entries_field)

    @model_validator(mode="after")
    def _check_unique_ids(self):
        ids = [entry.id for entry in self.entries]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate item ids: {', '.join(duplicates)}")
        return self


class PairsDefinition(GameDefinition):
    game_type: ClassVar[GameType] = GameType.PAIRS

    items: list[PairsItem] = Field(min_length=1)


class FlashcardsDefinition(GameDefinition):
    game_type: ClassVar[GameType] = GameType.FLASHCARDS
    entries_field: ClassVar[str] = "cards"

    cards: list[FlashcardItem] = Field(min_length=1)


class SplatDefinition(GameDefinition):
    game_type: ClassVar[GameType] = GameType.SPLAT

    items: list[SplatItem] = Field(min_length=1)
    time_limit_seconds: int = Field(
        default=10,
        ge=1,
        validation_alias=AliasChoices(
            "time_limit_seconds", "timeLimitSeconds", "timeLimit"
        ),
    )

    @field_validator("time_limit_seconds", mode="before")
    @classmethod
    def _default_time_limit(cls, value: Any) -> Any:
        # Stored games leave timeLimit unset or null to mean the default
        return 10 if value is None else value


class SwipeDefinition(GameDefinition):
    game_type: ClassVar[GameType] = GameType.SWIPE

    items: list[SwipeItem] = Field(min_length=1)


DEFINITION_TYPES: dict[GameType, type[GameDefinition]] = {
    GameType.PAIRS: PairsDefinition,
    GameType.FLASHCARDS: FlashcardsDefinition,
    GameType.SPLAT: SplatDefinition,
    GameType.SWIPE: SwipeDefinition,
}


# ============================================================================
# Session State Models
# ============================================================================


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"


class SessionState(BaseModel):
    """Fields every game session tracks, regardless of type."""

    status: SessionStatus = SessionStatus.NOT_STARTED
    elapsed_seconds: int = 0
    paused: bool = False  # An overlay is open; the clock does not accumulate


class PairsCard(BaseModel):
    card_id: str
    content: str
    image: str | None = None
    pair_id: str
    is_flipped: bool = False
    is_matched: bool = False


class PairsState(SessionState):
    cards: list[PairsCard] = Field(default_factory=list)
    face_up: list[str] = Field(default_factory=list)  # Unmatched face-up card ids
    moves: int = 0
    resolving: bool = False  # Mismatch shown, waiting to flip back

    def card(self, card_id: str) -> PairsCard | None:
        """Get a card by its id."""
        for card in self.cards:
            if card.card_id == card_id:
                return card
        return None

    @property
    def matched_pairs(self) -> int:
        return sum(1 for card in self.cards if card.is_matched) // 2

    @property
    def all_matched(self) -> bool:
        return bool(self.cards) and all(card.is_matched for card in self.cards)


class CardProgress(BaseModel):
    card_id: str
    known: bool | None = None
    viewed: bool = False


class FlashcardsState(SessionState):
    cards: list[FlashcardItem] = Field(default_factory=list)
    progress: list[CardProgress] = Field(default_factory=list)
    cursor: int = 0
    showing_back: bool = False
    shuffled: bool = False
    review_mode: bool = False

    @property
    def current_card(self) -> FlashcardItem:
        return self.cards[self.cursor]

    @property
    def current_progress(self) -> CardProgress:
        return self.progress[self.cursor]

    @property
    def assessed_count(self) -> int:
        return sum(1 for p in self.progress if p.known is not None)

    @property
    def known_count(self) -> int:
        return sum(1 for p in self.progress if p.known is True)

    @property
    def unknown_count(self) -> int:
        return sum(1 for p in self.progress if p.known is False)

    @property
    def all_assessed(self) -> bool:
        return all(p.known is not None for p in self.progress)


class QuestionPhase(str, Enum):
    ACTIVE = "active"
    ANSWERED = "answered"
    TIMED_OUT = "timed_out"
    REVEALING = "revealing"  # Showing the correct answer after a miss


class QuestionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: str
    correct: bool
    reaction_time_ms: int
    points: int
    timed_out: bool = False


class SplatState(SessionState):
    items: list[SplatItem] = Field(default_factory=list)
    index: int = 0
    phase: QuestionPhase = QuestionPhase.ACTIVE
    options: list[str] = Field(default_factory=list)
    selected: str | None = None
    time_left: int = 0
    activated_at: float = 0.0  # Scheduler time when the question became active
    results: list[QuestionResult] = Field(default_factory=list)
    total_points: int = 0

    @property
    def current_item(self) -> SplatItem:
        return self.items[self.index]

    @property
    def correct_count(self) -> int:
        return sum(1 for r in self.results if r.correct)


class SwipeDirection(str, Enum):
    LEFT = "left"  # false / incorrect
    RIGHT = "right"  # true / correct

    @property
    def guess(self) -> bool:
        return self is SwipeDirection.RIGHT


class SwipeRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: str
    statement: str
    direction: SwipeDirection
    correct: bool
    timestamp: float


class SwipePhase(str, Enum):
    ACTIVE = "active"
    FEEDBACK = "feedback"


class SwipeState(SessionState):
    items: list[SwipeItem] = Field(default_factory=list)
    cursor: int = 0
    phase: SwipePhase = SwipePhase.ACTIVE
    records: list[SwipeRecord] = Field(default_factory=list)
    correct_count: int = 0
    can_undo: bool = False

    @property
    def current_item(self) -> SwipeItem | None:
        if self.cursor < len(self.items):
            return self.items[self.cursor]
        return None

    @property
    def last_record(self) -> SwipeRecord | None:
        return self.records[-1] if self.records else None


# ============================================================================
# Results and Persisted Records
# ============================================================================


class SessionResult(BaseModel):
    """The normalized result every game session produces exactly once."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    score_percentage: float = Field(ge=0.0, le=100.0, alias="scorePercentage")
    time_taken_seconds: int = Field(ge=0, alias="timeTakenSeconds")
    attempt_data: dict[str, Any] = Field(default_factory=dict, alias="attemptData")


class FlashcardProgressRecord(BaseModel):
    """Snapshot of a running flashcard session, stored so a reload can resume it."""

    cards: list[FlashcardItem]
    cursor: int = Field(ge=0)
    progress: list[CardProgress]
    elapsed_seconds: int = Field(ge=0)
    shuffled: bool = False
    last_saved: datetime


class AttemptRecord(BaseModel):
    """A recorded, completed game session."""

    id: str
    game_type: GameType
    game_name: str
    game_id: str | None = None
    score_percentage: float
    time_taken_seconds: int
    attempt_data: dict[str, Any] = Field(default_factory=dict)
    completed_at: datetime


# ============================================================================
# Content Loading
# ============================================================================


def load_definition(game_type: GameType | str, raw: Any) -> GameDefinition:
    """Validate raw game data into a definition.

    Args:
        game_type: The game type tag (e.g. "pairs").
        raw: Mapping with the game's name, optional id and type-specific data.

    Returns:
        The validated, immutable definition.

    Raises:
        ContentLoadError: If the type is unknown or the data is malformed or empty.
    """
    if isinstance(game_type, str):
        # Stored games tag the type in upper case
        game_type = game_type.lower()
    try:
        game_type = GameType(game_type)
    except ValueError as e:
        raise ContentLoadError(f"Unknown game type: {game_type!r}") from e

    if not isinstance(raw, dict):
        raise ContentLoadError(f"Game data for {game_type.value} must be an object")

    try:
        return DEFINITION_TYPES[game_type].model_validate(raw)
    except ValidationError as e:
        raise ContentLoadError(
            f"Cannot load {game_type.value} game: {e.error_count()} invalid field(s)"
        ) from e


def load_definition_file(path: Path) -> GameDefinition:
    """Load a game definition from a JSON file.

    The file holds ``{"gameType": ..., "name": ..., "id": ..., "gameData": {...}}``,
    the same shape the backend stores games in.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ContentLoadError(f"Cannot read game file {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("gameData"), dict):
        raise ContentLoadError(f"Game file {path} has no gameData object")

    raw = dict(data["gameData"])
    raw["name"] = data.get("name", "")
    if data.get("id") is not None:
        raw["id"] = str(data["id"])
    return load_definition(data.get("gameType", ""), raw)
