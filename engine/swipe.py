"""Swipe classification session.

Each statement is swiped right (true) or left (false). A classification
advances the cursor and shows brief feedback. The most recent classification
can be undone while its feedback is showing.
"""

from engine.base import SessionController
from engine.config import SwipeConfig
from engine.clock import ScheduledTask
from engine.results import normalize_result, percentage
from models import (
    GameType,
    SessionResult,
    SessionStatus,
    SwipeDefinition,
    SwipeDirection,
    SwipePhase,
    SwipeRecord,
    SwipeState,
)


def classify_item(
    state: SwipeState, direction: SwipeDirection, timestamp: float
) -> SwipeState | None:
    """Record a classification of the current item and move past it."""
    if state.status != SessionStatus.RUNNING or state.phase != SwipePhase.ACTIVE:
        return None
    item = state.current_item
    if item is None:
        return None

    correct = direction.guess == item.is_correct
    new_state = state.model_copy(deep=True)
    new_state.records.append(
        SwipeRecord(
            item_id=item.id,
            statement=item.statement,
            direction=direction,
            correct=correct,
            timestamp=timestamp,
        )
    )
    if correct:
        new_state.correct_count += 1
    new_state.cursor += 1
    new_state.phase = SwipePhase.FEEDBACK
    new_state.can_undo = True
    return new_state


def undo_last(state: SwipeState) -> SwipeState | None:
    """Take back the most recent classification."""
    if state.status != SessionStatus.RUNNING:
        return None
    if not state.can_undo or not state.records:
        return None

    new_state = state.model_copy(deep=True)
    last = new_state.records.pop()
    if last.correct:
        new_state.correct_count -= 1
    new_state.cursor -= 1
    new_state.phase = SwipePhase.ACTIVE
    new_state.can_undo = False
    return new_state


def end_feedback(state: SwipeState) -> SwipeState:
    """Finalize the most recent classification; it can no longer be undone."""
    new_state = state.model_copy(deep=True)
    new_state.phase = SwipePhase.ACTIVE
    new_state.can_undo = False
    return new_state


class SwipeController(SessionController[SwipeDefinition, SwipeState]):
    """Controller for swipe classification sessions."""

    game_type = GameType.SWIPE

    def __init__(
        self,
        definition: SwipeDefinition,
        *,
        config: SwipeConfig | None = None,
        **kwargs,
    ):
        super().__init__(definition, **kwargs)
        self.config = config or SwipeConfig()
        self._feedback_task: ScheduledTask | None = None

    def empty_state(self) -> SwipeState:
        return SwipeState()

    def new_state(self) -> SwipeState:
        return SwipeState(items=list(self.definition.items))

    @property
    def last_correct(self) -> bool | None:
        last = self.state.last_record
        return last.correct if last else None

    def classify(self, direction: SwipeDirection | str) -> bool:
        """Swipe the current statement left (false) or right (true)."""
        if not self.is_running:
            return False
        try:
            direction = SwipeDirection(direction)
        except ValueError:
            return False

        new_state = classify_item(self.state, direction, self.scheduler.now)
        if new_state is None:
            return False
        self.state = new_state
        self._feedback_task = self.schedule(
            self.config.feedback_delay, self._end_feedback
        )
        return True

    def undo(self) -> bool:
        """Undo the most recent classification. A second undo in a row is ignored."""
        if not self.is_running:
            return False
        new_state = undo_last(self.state)
        if new_state is None:
            return False

        if self._feedback_task is not None:
            self._feedback_task.cancel()
            self._feedback_task = None
        self.state = new_state
        return True

    def _end_feedback(self) -> None:
        self._feedback_task = None
        self.state = end_feedback(self.state)
        if self.state.cursor >= len(self.state.items):
            self.complete()

    def build_result(self) -> SessionResult:
        total = len(self.state.items)
        correct = self.state.correct_count
        explanations = {item.id: item.explanation for item in self.state.items}

        swipes = []
        for record in self.state.records:
            swipe = {
                "itemId": record.item_id,
                "statement": record.statement,
                "direction": record.direction.value,
                "correct": record.correct,
            }
            if not record.correct and explanations.get(record.item_id):
                swipe["explanation"] = explanations[record.item_id]
            swipes.append(swipe)

        return normalize_result(
            percentage(correct, total),
            self.state.elapsed_seconds,
            {
                "totalQuestions": total,
                "correctSwipes": correct,
                "incorrectSwipes": total - correct,
                "swipes": swipes,
            },
        )
