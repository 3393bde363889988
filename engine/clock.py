"""Cooperative timer subsystem for game sessions.

A session never runs background threads. All timing (the 1 Hz clock, settle
delays, countdowns) is expressed as tasks on a ``Scheduler`` that owns a
virtual clock. Whoever drives the session advances that clock: tests step it
manually, the terminal player syncs it to wall time before handling input.
Due tasks run one at a time, in due-time order, so a tick and a player action
can never interleave.
"""

import heapq
import itertools
from collections.abc import Callable


class ScheduledTask:
    """Handle for a deferred or repeating callback."""

    def __init__(
        self,
        when: float,
        seq: int,
        callback: Callable[[], None],
        interval: float | None = None,
    ):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self) -> None:
        """Prevent the callback from running (again)."""
        self.cancelled = True

    def __lt__(self, other: "ScheduledTask") -> bool:
        return (self.when, self.seq) < (other.when, other.seq)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "pending"
        return f"<ScheduledTask when={self.when:.3f} {state}>"


class Scheduler:
    """Single-threaded scheduler over a virtual clock measured in seconds."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[ScheduledTask] = []
        self._counter = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Run ``callback`` once, ``delay`` seconds from now."""
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        task = ScheduledTask(self._now + delay, next(self._counter), callback)
        heapq.heappush(self._queue, task)
        return task

    def call_every(
        self, interval: float, callback: Callable[[], None]
    ) -> ScheduledTask:
        """Run ``callback`` every ``interval`` seconds, first after one interval."""
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        task = ScheduledTask(
            self._now + interval, next(self._counter), callback, interval
        )
        heapq.heappush(self._queue, task)
        return task

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every task that falls due."""
        self.advance_to(self._now + seconds)

    def advance_to(self, target: float) -> None:
        """Move the clock to ``target``, running due tasks in order.

        Each callback completes before the next one starts. The clock never
        moves backwards; an earlier target only runs tasks already due.
        """
        while self._queue and self._queue[0].when <= target:
            task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self._now = max(self._now, task.when)
            if task.interval is not None:
                # Re-arm before running so the callback may cancel it
                task.when += task.interval
                task.seq = next(self._counter)
                heapq.heappush(self._queue, task)
            task.callback()
        self._now = max(self._now, target)

    def pending(self) -> list[ScheduledTask]:
        """Tasks that have not run (or will run again) and were not cancelled."""
        return sorted(task for task in self._queue if not task.cancelled)
