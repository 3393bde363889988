"""Tests for randomized ordering."""

import random

from engine.shuffle import sample_distinct, shuffle


class TestShuffle:
    """Tests for the Fisher-Yates shuffle."""

    def test_returns_permutation(self, rng):
        """Should contain exactly the input items."""
        items = list(range(20))
        result = shuffle(items, rng)
        assert sorted(result) == items

    def test_does_not_mutate_input(self, rng):
        """Should leave the input sequence in its original order."""
        items = [1, 2, 3, 4, 5]
        shuffle(items, rng)
        assert items == [1, 2, 3, 4, 5]

    def test_empty_and_single(self, rng):
        """Should handle trivial inputs."""
        assert shuffle([], rng) == []
        assert shuffle(["only"], rng) == ["only"]

    def test_seeded_rng_is_deterministic(self):
        """Should produce the same order for the same seed."""
        items = list("abcdefgh")
        assert shuffle(items, random.Random(7)) == shuffle(items, random.Random(7))

    def test_every_permutation_reachable(self):
        """Should produce all orderings of a small list over many draws."""
        rng = random.Random(0)
        seen = {tuple(shuffle([1, 2, 3], rng)) for _ in range(300)}
        assert len(seen) == 6


class TestSampleDistinct:
    """Tests for distinct sampling."""

    def test_dedupes_and_excludes(self, rng):
        """Should never repeat a value or return an excluded one."""
        result = sample_distinct(["x", "y", "x", "z", "y"], 5, exclude={"z"}, rng=rng)
        assert sorted(result) == ["x", "y"]

    def test_caps_at_count(self, rng):
        """Should return at most ``count`` values."""
        assert len(sample_distinct(range(10), 3, rng=rng)) == 3

    def test_empty_pool(self, rng):
        """Should return nothing when every value is excluded."""
        assert sample_distinct(["a", "a"], 2, exclude={"a"}, rng=rng) == []
