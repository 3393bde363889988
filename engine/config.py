"""Configuration for game sessions.

These models tune session timing and scoring, such as settle delays and
the speed bonus awarded in the timed-reaction game.
"""

from pydantic import BaseModel, Field


class PairsConfig(BaseModel):
    """Configuration for matching-pairs sessions."""

    mismatch_delay: float = Field(default=1.0, ge=0.0)


class FlashcardsConfig(BaseModel):
    """Configuration for flashcard sessions."""

    advance_delay: float = Field(default=0.3, ge=0.0)
    storage_key_prefix: str = "flashcards_progress_"


class SplatConfig(BaseModel):
    """Configuration for timed-reaction sessions."""

    max_distractors: int = Field(default=2, ge=1, le=5)
    base_points: int = Field(default=100, ge=0)
    max_speed_bonus: int = Field(default=50, ge=0)
    wrong_penalty: int = Field(default=10, ge=0)
    correct_delay: float = Field(default=0.8, ge=0.0)
    wrong_reveal_delay: float = Field(default=0.5, ge=0.0)
    reveal_delay: float = Field(default=1.5, ge=0.0)
    timeout_reveal_delay: float = Field(default=2.0, ge=0.0)


class SwipeConfig(BaseModel):
    """Configuration for swipe classification sessions."""

    feedback_delay: float = Field(default=0.8, ge=0.0)


class EngineConfig(BaseModel):
    """Master configuration for all game types."""

    tick_interval: float = Field(default=1.0, gt=0.0)
    pairs: PairsConfig = Field(default_factory=PairsConfig)
    flashcards: FlashcardsConfig = Field(default_factory=FlashcardsConfig)
    splat: SplatConfig = Field(default_factory=SplatConfig)
    swipe: SwipeConfig = Field(default_factory=SwipeConfig)
