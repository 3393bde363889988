"""Tests for the cooperative scheduler."""

import pytest

from engine.clock import Scheduler


class TestScheduler:
    """Tests for Scheduler."""

    def test_call_later_runs_when_due(self, scheduler):
        """Should run a task only once its time is reached."""
        calls = []
        scheduler.call_later(1.5, lambda: calls.append(scheduler.now))
        scheduler.advance(1.0)
        assert calls == []
        scheduler.advance(0.5)
        assert calls == [1.5]

    def test_tasks_run_in_time_order(self, scheduler):
        """Should run tasks by due time, then by scheduling order."""
        order = []
        scheduler.call_later(2.0, lambda: order.append("late"))
        scheduler.call_later(1.0, lambda: order.append("first"))
        scheduler.call_later(1.0, lambda: order.append("second"))
        scheduler.advance(5.0)
        assert order == ["first", "second", "late"]

    def test_cancelled_task_never_runs(self, scheduler):
        """Should skip cancelled tasks."""
        calls = []
        task = scheduler.call_later(1.0, lambda: calls.append(1))
        task.cancel()
        scheduler.advance(2.0)
        assert calls == []
        assert scheduler.pending() == []

    def test_call_every_repeats(self, scheduler):
        """Should fire once per interval, starting one interval from now."""
        ticks = []
        scheduler.call_every(1.0, lambda: ticks.append(scheduler.now))
        scheduler.advance(3.5)
        assert ticks == [1.0, 2.0, 3.0]

    def test_repeating_task_can_cancel_itself(self, scheduler):
        """Should stop repeating once cancelled from its own callback."""
        ticks = []

        def tick():
            ticks.append(scheduler.now)
            if len(ticks) == 2:
                task.cancel()

        task = scheduler.call_every(1.0, tick)
        scheduler.advance(10.0)
        assert ticks == [1.0, 2.0]

    def test_tasks_scheduled_by_callbacks_run_in_same_advance(self, scheduler):
        """Should run chained continuations that fall due within the window."""
        order = []

        def first():
            order.append(("first", scheduler.now))
            scheduler.call_later(0.5, lambda: order.append(("second", scheduler.now)))

        scheduler.call_later(1.0, first)
        scheduler.advance(2.0)
        assert order == [("first", 1.0), ("second", 1.5)]
        assert scheduler.now == 2.0

    def test_clock_never_moves_backwards(self, scheduler):
        """Should ignore earlier targets."""
        scheduler.advance(5.0)
        scheduler.advance_to(3.0)
        assert scheduler.now == 5.0

    def test_rejects_invalid_delays(self, scheduler):
        """Should refuse negative delays and non-positive intervals."""
        with pytest.raises(ValueError):
            scheduler.call_later(-1, lambda: None)
        with pytest.raises(ValueError):
            scheduler.call_every(0, lambda: None)

    def test_custom_start(self):
        """Should start the clock at the given time."""
        assert Scheduler(start=10.0).now == 10.0
