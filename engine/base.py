"""Abstract base class for game session controllers."""

import logging
import random
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, TypeVar

from engine.clock import ScheduledTask, Scheduler
from models import (
    ContentLoadError,
    GameDefinition,
    GameType,
    SessionResult,
    SessionState,
    SessionStatus,
)

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=GameDefinition)
S = TypeVar("S", bound=SessionState)

ResultSink = Callable[[SessionResult], None]


class SessionController(ABC, Generic[D, S]):
    """Owns one game session: its state, its clock and its pending work.

    Each game type implements this interface to provide:
    - A fresh running state built from the definition
    - Player actions, each a pure transition on the state plus scheduling
    - The normalized result at completion

    Player actions never raise for illegal input. They return False and leave
    the state untouched, since they arise naturally from fast input or UI races.
    The UI may read ``state`` but only changes it through actions.
    """

    game_type: GameType

    def __init__(
        self,
        definition: D,
        *,
        scheduler: Scheduler | None = None,
        on_complete: ResultSink | None = None,
        rng: random.Random | None = None,
        tick_interval: float = 1.0,
    ):
        self.definition = definition
        self.scheduler = scheduler or Scheduler()
        self.on_complete = on_complete
        self.rng = rng or random.Random()
        self.tick_interval = tick_interval
        self.state: S = self.empty_state()
        self.result: SessionResult | None = None
        self.exited = False
        self._epoch = 0
        self._ticker: ScheduledTask | None = None
        self._pending: set[ScheduledTask] = set()
        self._paused_at: float | None = None

    @abstractmethod
    def empty_state(self) -> S:
        """State before the session starts."""
        ...

    @abstractmethod
    def new_state(self) -> S:
        """A fresh session state built from the definition."""
        ...

    @abstractmethod
    def build_result(self) -> SessionResult:
        """Compute the result from the completed state."""
        ...

    @property
    def status(self) -> SessionStatus:
        return self.state.status

    @property
    def is_running(self) -> bool:
        return self.state.status == SessionStatus.RUNNING and not self.exited

    @property
    def pending_continuations(self) -> list[ScheduledTask]:
        """Deferred transitions that have not run yet, soonest first."""
        return sorted(task for task in self._pending if not task.cancelled)

    def validate(self) -> None:
        """Refuse content that cannot be played.

        Raises:
            ContentLoadError: If the definition has no items or duplicate ids.
        """
        entries = self.definition.entries
        if not entries:
            raise ContentLoadError(f"{self.definition.name!r} has no items")
        ids = [entry.id for entry in entries]
        if len(set(ids)) != len(ids):
            raise ContentLoadError(f"{self.definition.name!r} has duplicate item ids")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Move from not_started to running.

        Raises:
            ContentLoadError: If the definition cannot be played.
        """
        if self.state.status != SessionStatus.NOT_STARTED or self.exited:
            return
        self.validate()
        self.begin(self.new_state())

    def restart(self) -> bool:
        """Discard the current session and begin a new one from the definition."""
        if self.state.status == SessionStatus.NOT_STARTED or self.exited:
            return False
        self.begin(self.new_state())
        return True

    def exit(self) -> None:
        """Quit the session. Nothing scheduled by it will run afterwards."""
        if self.exited:
            return
        self.exited = True
        self._epoch += 1
        self._stop_ticker()
        self._cancel_pending()
        logger.info(
            "Exited %s session %r (%s)",
            self.game_type.value,
            self.definition.name,
            self.state.status.value,
        )

    def pause(self) -> bool:
        """Suspend the clock while an overlay is open."""
        if not self.is_running or self.state.paused:
            return False
        self.state.paused = True
        self._paused_at = self.scheduler.now
        return True

    def resume(self) -> bool:
        """Resume the clock after ``pause``."""
        if not self.is_running or not self.state.paused:
            return False
        self.state.paused = False
        paused_for = self.scheduler.now - (self._paused_at or self.scheduler.now)
        self._paused_at = None
        self.on_resumed(paused_for)
        return True

    def begin(self, state: S) -> None:
        """Install ``state`` as a new running session."""
        self._epoch += 1
        self._stop_ticker()
        self._cancel_pending()
        self._paused_at = None
        self.result = None
        state.status = SessionStatus.RUNNING
        self.state = state
        logger.debug(
            "Started %s session %r with %d items",
            self.game_type.value,
            self.definition.name,
            len(self.definition.entries),
        )
        self.on_started()

    def complete(self) -> None:
        """Enter the terminal state and hand the result to the sink, once."""
        if self.state.status != SessionStatus.RUNNING:
            return
        self._stop_ticker()
        self._cancel_pending()
        self.state.status = SessionStatus.COMPLETED
        self.result = self.build_result()
        logger.info(
            "Completed %s session %r: %.1f%% in %ds",
            self.game_type.value,
            self.definition.name,
            self.result.score_percentage,
            self.result.time_taken_seconds,
        )
        self.on_completed()
        if self.on_complete is not None:
            self.on_complete(self.result)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def on_started(self) -> None:
        """Called after a new session begins. Starts the elapsed-time clock."""
        self.start_ticker()

    def on_tick(self) -> None:
        """Called once per tick while running and not paused."""
        self.state.elapsed_seconds += 1

    def on_resumed(self, paused_for: float) -> None:
        """Called after ``resume`` with the time spent paused."""

    def on_completed(self) -> None:
        """Called after the session completes, before the result is emitted."""

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def start_ticker(self) -> None:
        """(Re)start the session clock; the first tick is one interval away."""
        self._stop_ticker()
        epoch = self._epoch

        def tick() -> None:
            if epoch != self._epoch or not self.is_running or self.state.paused:
                return
            self.on_tick()

        self._ticker = self.scheduler.call_every(self.tick_interval, tick)

    def stop_ticker(self) -> None:
        self._stop_ticker()

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Defer a transition; it becomes a no-op if the session moved on."""
        epoch = self._epoch

        def run() -> None:
            self._pending.discard(task)
            if epoch != self._epoch or not self.is_running:
                return
            callback()

        task = self.scheduler.call_later(delay, run)
        self._pending.add(task)
        return task

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _cancel_pending(self) -> None:
        for task in self._pending:
            task.cancel()
        self._pending.clear()
