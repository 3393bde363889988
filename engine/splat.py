"""Timed-reaction ("Splat") session.

Each question shows the correct answer among a few distractors taken from
the other questions' answers, with a per-question countdown. Fast correct
answers earn a speed bonus, wrong answers cost a fixed penalty, and a
question left unanswered when the countdown reaches zero times out. After a
short settle (longer when the correct answer is revealed) the next question
becomes active.
"""

import math
import random

from engine.base import SessionController
from engine.config import SplatConfig
from engine.results import normalize_result, percentage
from engine.shuffle import sample_distinct, shuffle
from models import (
    GameType,
    QuestionPhase,
    QuestionResult,
    SessionResult,
    SessionStatus,
    SplatDefinition,
    SplatItem,
    SplatState,
)


def calculate_points(
    reaction_time_ms: int,
    time_limit_ms: int,
    base_points: int = 100,
    max_speed_bonus: int = 50,
) -> int:
    """Points for a correct answer: the base plus a bonus that shrinks with time."""
    ratio = max(0.0, (time_limit_ms - reaction_time_ms) / time_limit_ms)
    return base_points + math.floor(ratio * max_speed_bonus)


def pick_options(
    items: list[SplatItem],
    index: int,
    max_distractors: int,
    rng: random.Random | None = None,
) -> list[str]:
    """The selectable answers for a question, in random order.

    Distractors are other questions' answers. Repeated answers are offered
    once, and answers equal to the correct one are never used as distractors.
    """
    correct = items[index].answer
    others = [item.answer for i, item in enumerate(items) if i != index]
    distractors = sample_distinct(others, max_distractors, exclude={correct}, rng=rng)
    return shuffle([correct, *distractors], rng)


def activate_question(
    state: SplatState,
    index: int,
    options: list[str],
    now: float,
    time_limit_seconds: int,
) -> SplatState:
    new_state = state.model_copy(deep=True)
    new_state.index = index
    new_state.phase = QuestionPhase.ACTIVE
    new_state.options = options
    new_state.selected = None
    new_state.time_left = time_limit_seconds
    new_state.activated_at = now
    return new_state


def resolve_answer(
    state: SplatState,
    value: str,
    now: float,
    time_limit_seconds: int,
    config: SplatConfig,
) -> SplatState | None:
    """Score an answer to the active question.

    Returns:
        The new state, or None if the question is no longer accepting answers.
    """
    if state.status != SessionStatus.RUNNING or state.phase != QuestionPhase.ACTIVE:
        return None
    if value not in state.options:
        return None

    time_limit_ms = time_limit_seconds * 1000
    reaction_time_ms = max(0, round((now - state.activated_at) * 1000))
    correct = value == state.current_item.answer

    new_state = state.model_copy(deep=True)
    new_state.phase = QuestionPhase.ANSWERED
    new_state.selected = value
    if correct:
        points = calculate_points(
            reaction_time_ms,
            time_limit_ms,
            config.base_points,
            config.max_speed_bonus,
        )
        new_state.total_points += points
    else:
        points = -config.wrong_penalty
        new_state.total_points = max(0, new_state.total_points - config.wrong_penalty)

    new_state.results.append(
        QuestionResult(
            question_id=state.current_item.id,
            correct=correct,
            reaction_time_ms=reaction_time_ms,
            points=points,
        )
    )
    return new_state


def resolve_timeout(state: SplatState, time_limit_seconds: int) -> SplatState | None:
    """Record the active question as unanswered."""
    if state.status != SessionStatus.RUNNING or state.phase != QuestionPhase.ACTIVE:
        return None
    new_state = state.model_copy(deep=True)
    new_state.phase = QuestionPhase.TIMED_OUT
    new_state.time_left = 0
    new_state.results.append(
        QuestionResult(
            question_id=state.current_item.id,
            correct=False,
            reaction_time_ms=time_limit_seconds * 1000,
            points=0,
            timed_out=True,
        )
    )
    return new_state


def reveal_answer(state: SplatState) -> SplatState:
    new_state = state.model_copy(deep=True)
    new_state.phase = QuestionPhase.REVEALING
    return new_state


class SplatController(SessionController[SplatDefinition, SplatState]):
    """Controller for timed-reaction sessions.

    The ticker doubles as the countdown: it restarts when a question becomes
    active and stops as soon as the question is answered or times out.
    """

    game_type = GameType.SPLAT

    def __init__(
        self,
        definition: SplatDefinition,
        *,
        config: SplatConfig | None = None,
        **kwargs,
    ):
        super().__init__(definition, **kwargs)
        self.config = config or SplatConfig()

    @property
    def time_limit_seconds(self) -> int:
        return self.definition.time_limit_seconds

    def empty_state(self) -> SplatState:
        return SplatState()

    def new_state(self) -> SplatState:
        return SplatState(items=list(self.definition.items))

    @property
    def correct_answer(self) -> str:
        return self.state.current_item.answer

    @property
    def showing_correct_answer(self) -> bool:
        return self.state.phase in (QuestionPhase.TIMED_OUT, QuestionPhase.REVEALING)

    def on_started(self) -> None:
        self._activate(0)

    def on_tick(self) -> None:
        super().on_tick()
        if self.state.phase != QuestionPhase.ACTIVE:
            return
        self.state.time_left -= 1
        if self.state.time_left <= 0:
            self._timeout()

    def on_resumed(self, paused_for: float) -> None:
        # Reaction time excludes time spent behind an overlay
        self.state.activated_at += paused_for

    def answer(self, value: str) -> bool:
        """Pick an answer for the active question. Ignored once it has resolved."""
        if not self.is_running or self.state.paused:
            return False
        new_state = resolve_answer(
            self.state,
            value,
            self.scheduler.now,
            self.time_limit_seconds,
            self.config,
        )
        if new_state is None:
            return False

        self.stop_ticker()
        self.state = new_state
        if self.state.results[-1].correct:
            self.schedule(self.config.correct_delay, self._next_question)
        else:
            self.schedule(self.config.wrong_reveal_delay, self._reveal)
        return True

    def _timeout(self) -> None:
        new_state = resolve_timeout(self.state, self.time_limit_seconds)
        if new_state is None:
            return
        self.stop_ticker()
        self.state = new_state
        self.schedule(self.config.timeout_reveal_delay, self._next_question)

    def _reveal(self) -> None:
        self.state = reveal_answer(self.state)
        self.schedule(self.config.reveal_delay, self._next_question)

    def _next_question(self) -> None:
        self._activate(self.state.index + 1)

    def _activate(self, index: int) -> None:
        if index >= len(self.state.items):
            self.complete()
            return
        options = pick_options(
            self.state.items, index, self.config.max_distractors, self.rng
        )
        self.state = activate_question(
            self.state, index, options, self.scheduler.now, self.time_limit_seconds
        )
        self.start_ticker()

    def build_result(self) -> SessionResult:
        results = self.state.results
        total = len(self.state.items)
        correct = self.state.correct_count
        reaction_times = [r.reaction_time_ms for r in results]
        total_time_ms = sum(reaction_times)

        return normalize_result(
            percentage(correct, total),
            total_time_ms // 1000,
            {
                "totalQuestions": total,
                "correctAnswers": correct,
                "timedOutAnswers": sum(1 for r in results if r.timed_out),
                "totalScore": self.state.total_points,
                "reactionTimes": reaction_times,
                "scores": [r.points for r in results],
                "averageReactionTime": (
                    total_time_ms / len(results) if results else 0
                ),
                "fastestReaction": min(reaction_times) if reaction_times else 0,
            },
        )
