"""Matching-pairs session: flip two cards at a time until every pair is matched.

Each pair item becomes two cards, shuffled once per session. A second flip
locks input while the two face-up cards are compared. A match is permanent
immediately; a mismatch stays visible for a settle delay and then both cards
turn back face down. A move is one completed pair of flips.
"""

import random
from collections.abc import Sequence

from engine.base import SessionController
from engine.config import PairsConfig
from engine.results import normalize_result
from engine.shuffle import shuffle
from models import (
    GameType,
    PairsCard,
    PairsDefinition,
    PairsItem,
    PairsState,
    SessionResult,
    SessionStatus,
)


def build_cards(
    items: Sequence[PairsItem], rng: random.Random | None = None
) -> list[PairsCard]:
    """Expand N pair items into 2N shuffled cards."""
    cards: list[PairsCard] = []
    for item in items:
        cards.append(
            PairsCard(
                card_id=f"{item.id}-left",
                content=item.left_text,
                image=item.left_image,
                pair_id=item.id,
            )
        )
        cards.append(
            PairsCard(
                card_id=f"{item.id}-right",
                content=item.right_text,
                image=item.right_image,
                pair_id=item.id,
            )
        )
    return shuffle(cards, rng)


def flip_card(state: PairsState, card_id: str) -> PairsState | None:
    """Turn a card face up, comparing it on the second flip of a move.

    Returns:
        The new state, or None if the flip is not allowed right now.
    """
    if state.status != SessionStatus.RUNNING:
        return None
    if state.resolving or len(state.face_up) >= 2:
        return None

    card = state.card(card_id)
    if card is None or card.is_flipped or card.is_matched:
        return None

    new_state = state.model_copy(deep=True)
    new_state.card(card_id).is_flipped = True
    new_state.face_up.append(card_id)

    if len(new_state.face_up) == 2:
        new_state.moves += 1
        first, second = (new_state.card(cid) for cid in new_state.face_up)
        if first.pair_id == second.pair_id:
            first.is_matched = True
            second.is_matched = True
            new_state.face_up = []
        else:
            new_state.resolving = True

    return new_state


def settle_mismatch(state: PairsState) -> PairsState:
    """Turn the mismatched face-up cards back down and release the lock."""
    new_state = state.model_copy(deep=True)
    for card_id in new_state.face_up:
        new_state.card(card_id).is_flipped = False
    new_state.face_up = []
    new_state.resolving = False
    return new_state


class PairsController(SessionController[PairsDefinition, PairsState]):
    """Controller for matching-pairs sessions."""

    game_type = GameType.PAIRS

    def __init__(
        self,
        definition: PairsDefinition,
        *,
        config: PairsConfig | None = None,
        **kwargs,
    ):
        super().__init__(definition, **kwargs)
        self.config = config or PairsConfig()

    def empty_state(self) -> PairsState:
        return PairsState()

    def new_state(self) -> PairsState:
        return PairsState(cards=build_cards(self.definition.items, self.rng))

    @property
    def total_pairs(self) -> int:
        return len(self.definition.items)

    def flip(self, card_id: str) -> bool:
        """Flip a card face up. Returns False if the flip was ignored."""
        if not self.is_running:
            return False
        new_state = flip_card(self.state, card_id)
        if new_state is None:
            return False

        self.state = new_state
        if self.state.resolving:
            self.schedule(self.config.mismatch_delay, self._settle)
        elif self.state.all_matched:
            self.complete()
        return True

    def _settle(self) -> None:
        self.state = settle_mismatch(self.state)

    def build_result(self) -> SessionResult:
        # Finishing is the only way to end a pairs game, so it always scores 100
        return normalize_result(
            100,
            self.state.elapsed_seconds,
            {
                "moves": self.state.moves,
                "pairs": self.total_pairs,
                "perfectGame": self.state.moves == self.total_pairs,
            },
        )
