"""Result normalization and performance feedback shared by all game types."""

from typing import Any

from pydantic import BaseModel

from models import GameType, SessionResult


class PerformanceLevel(BaseModel):
    label: str
    emoji: str


# (minimum score, label, emoji), highest threshold first
PERFORMANCE_LEVELS: dict[GameType, list[tuple[float, str, str]]] = {
    GameType.FLASHCARDS: [
        (90, "Excellent!", "🌟"),
        (75, "Great Job!", "⭐"),
        (50, "Good Effort!", "👍"),
        (0, "Keep Practicing!", "💪"),
    ],
    GameType.SPLAT: [
        (90, "Lightning Fast!", "⚡"),
        (75, "Sharp Reflexes!", "🎯"),
        (50, "Getting Better!", "👍"),
        (0, "Keep Practicing!", "💪"),
    ],
    GameType.SWIPE: [
        (90, "Outstanding!", "🏆"),
        (75, "Excellent!", "🎯"),
        (60, "Good Job!", "👍"),
        (0, "Keep Practicing!", "💪"),
    ],
}


def percentage(part: int, whole: int) -> float:
    """Share of ``part`` in ``whole`` as a percentage, 0 for an empty whole."""
    if whole <= 0:
        return 0.0
    return part / whole * 100


def normalize_result(
    score_percentage: float,
    time_taken_seconds: float,
    attempt_data: dict[str, Any],
) -> SessionResult:
    """Build the three-field result, clamping score and time into range."""
    score = min(100.0, max(0.0, float(score_percentage)))
    seconds = max(0, int(time_taken_seconds))
    return SessionResult(
        score_percentage=score,
        time_taken_seconds=seconds,
        attempt_data=dict(attempt_data),
    )


def star_rating(moves: int, pairs: int) -> int:
    """Stars for a matching-pairs game: 3 for a perfect game, fewer as moves grow."""
    if moves <= pairs:
        return 3
    if moves <= pairs * 1.5:
        return 2
    return 1


def performance_level(game_type: GameType, score_percentage: float) -> PerformanceLevel:
    """Encouragement label for a finished session."""
    if game_type == GameType.PAIRS:
        # Pairs is pass/fail; a completed game always earns the top level
        return PerformanceLevel(label="All Pairs Matched!", emoji="🏆")

    rounded = round(score_percentage)
    for threshold, label, emoji in PERFORMANCE_LEVELS[game_type]:
        if rounded >= threshold:
            return PerformanceLevel(label=label, emoji=emoji)
    return PerformanceLevel(label="Keep Practicing!", emoji="💪")
