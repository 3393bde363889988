"""Tests for result normalization and performance feedback."""

from engine.results import (
    normalize_result,
    percentage,
    performance_level,
    star_rating,
)
from models import GameType


class TestNormalizeResult:
    """Tests for normalize_result."""

    def test_clamps_score(self):
        """Should keep the score within 0-100."""
        assert normalize_result(150, 1, {}).score_percentage == 100.0
        assert normalize_result(-5, 1, {}).score_percentage == 0.0

    def test_floors_time_to_whole_seconds(self):
        """Should store non-negative whole seconds."""
        assert normalize_result(50, 2.9, {}).time_taken_seconds == 2
        assert normalize_result(50, -3, {}).time_taken_seconds == 0

    def test_copies_attempt_data(self):
        """Should not alias the caller's dict."""
        data = {"moves": 1}
        result = normalize_result(100, 0, data)
        data["moves"] = 99
        assert result.attempt_data == {"moves": 1}


class TestPercentage:
    """Tests for percentage."""

    def test_basic(self):
        assert percentage(1, 4) == 25.0

    def test_empty_whole(self):
        """Should be 0 rather than dividing by zero."""
        assert percentage(0, 0) == 0.0


class TestStarRating:
    """Tests for the matching-pairs star rating."""

    def test_perfect_game_three_stars(self):
        assert star_rating(4, 4) == 3

    def test_within_half_again_two_stars(self):
        assert star_rating(6, 4) == 2

    def test_many_moves_one_star(self):
        assert star_rating(7, 4) == 1


class TestPerformanceLevel:
    """Tests for performance_level."""

    def test_pairs_always_top_level(self):
        """Completed pairs games always earn the top message."""
        assert performance_level(GameType.PAIRS, 100).label == "All Pairs Matched!"

    def test_flashcards_thresholds(self):
        assert performance_level(GameType.FLASHCARDS, 95).label == "Excellent!"
        assert performance_level(GameType.FLASHCARDS, 80).label == "Great Job!"
        assert performance_level(GameType.FLASHCARDS, 50).label == "Good Effort!"
        assert performance_level(GameType.FLASHCARDS, 10).label == "Keep Practicing!"

    def test_splat_thresholds(self):
        assert performance_level(GameType.SPLAT, 90).label == "Lightning Fast!"
        assert performance_level(GameType.SPLAT, 0).label == "Keep Practicing!"

    def test_swipe_thresholds(self):
        assert performance_level(GameType.SWIPE, 66.7).label == "Good Job!"
        assert performance_level(GameType.SWIPE, 59).label == "Keep Practicing!"
