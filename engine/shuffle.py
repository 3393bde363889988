"""Randomized ordering shared by every game session."""

import random
from collections.abc import Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a new list with the items in uniformly random order (Fisher-Yates).

    The input sequence is never mutated, so a definition's item list can be
    reshuffled for every new session.

    Args:
        items: Items to permute.
        rng: Random source; defaults to the module-level generator.

    Returns:
        A permutation of ``items``.
    """
    randint = rng.randint if rng is not None else random.randint
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def sample_distinct(
    values: Iterable[T],
    count: int,
    exclude: Iterable[T] = (),
    rng: random.Random | None = None,
) -> list[T]:
    """Pick up to ``count`` distinct values in random order, skipping excluded ones."""
    excluded = set(exclude)
    unique = list(dict.fromkeys(v for v in values if v not in excluded))
    return shuffle(unique, rng)[:count]
