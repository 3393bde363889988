"""Tests for the swipe classification session."""

from engine import SwipeController
from models import SessionStatus, SwipeDirection, SwipePhase


def make_controller(definition, scheduler, results):
    return SwipeController(definition, scheduler=scheduler, on_complete=results.append)


class TestSwipeController:
    """Tests for SwipeController."""

    def test_classify_records_and_advances(self, swipe_definition, scheduler, results):
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        assert controller.classify("right") is True

        state = controller.state
        assert state.cursor == 1
        assert state.correct_count == 1
        assert state.phase == SwipePhase.FEEDBACK
        assert state.can_undo is True
        assert state.records[0].item_id == "s1"
        assert state.records[0].direction == SwipeDirection.RIGHT
        assert controller.last_correct is True

    def test_classify_blocked_during_feedback(self, swipe_definition, scheduler, results):
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        controller.classify(SwipeDirection.RIGHT)
        assert controller.classify(SwipeDirection.LEFT) is False
        scheduler.advance(0.8)
        assert controller.state.phase == SwipePhase.ACTIVE
        assert controller.classify(SwipeDirection.LEFT) is True

    def test_unknown_direction_ignored(self, swipe_definition, scheduler, results):
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        assert controller.classify("up") is False
        assert controller.state.records == []

    def test_left_on_false_statement_is_correct(
        self, swipe_definition, scheduler, results
    ):
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        controller.classify("right")
        scheduler.advance(0.8)
        controller.classify("left")
        assert controller.last_correct is True
        assert controller.state.correct_count == 2

    def test_undo_reverts_last_classification(
        self, swipe_definition, scheduler, results
    ):
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        controller.classify("right")
        scheduler.advance(0.8)
        controller.classify("right")
        assert controller.state.correct_count == 1

        scheduler.advance(0.5)
        assert controller.undo() is True
        state = controller.state
        assert state.cursor == 1
        assert state.correct_count == 1
        assert len(state.records) == 1
        assert state.phase == SwipePhase.ACTIVE
        assert state.can_undo is False

    def test_double_undo_is_noop(self, swipe_definition, scheduler, results):
        """Only the most recent classification can be undone."""
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        controller.classify("right")
        scheduler.advance(0.8)
        controller.classify("left")
        assert controller.undo() is True
        assert controller.undo() is False
        assert controller.state.cursor == 1
        assert len(controller.state.records) == 1

    def test_undo_refused_once_feedback_ends(
        self, swipe_definition, scheduler, results
    ):
        """A classification is final once its feedback has finished."""
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        controller.classify("right")
        scheduler.advance(5.0)

        assert controller.state.can_undo is False
        assert controller.undo() is False
        assert controller.state.cursor == 1
        assert controller.state.correct_count == 1
        assert len(controller.state.records) == 1

    def test_undo_before_any_swipe(self, swipe_definition, scheduler, results):
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        assert controller.undo() is False

    def test_undo_during_feedback_cancels_it(self, swipe_definition, scheduler, results):
        """Undoing the final swipe during feedback must not complete the session."""
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        for direction in ("right", "left"):
            controller.classify(direction)
            scheduler.advance(0.8)
        controller.classify("left")
        controller.undo()
        scheduler.advance(5.0)
        assert controller.status == SessionStatus.RUNNING
        assert controller.state.cursor == 2
        assert results == []

    def test_completes_after_last_feedback(self, swipe_definition, scheduler, results):
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        controller.classify("right")
        scheduler.advance(0.8)
        controller.classify("right")
        scheduler.advance(0.8)
        controller.classify("right")
        assert controller.status == SessionStatus.RUNNING
        scheduler.advance(0.8)

        assert controller.status == SessionStatus.COMPLETED
        assert controller.undo() is False
        result = results[0]
        assert round(result.score_percentage, 2) == 66.67
        assert result.time_taken_seconds == 2
        data = result.attempt_data
        assert data["totalQuestions"] == 3
        assert data["correctSwipes"] == 2
        assert data["incorrectSwipes"] == 1
        assert [s["correct"] for s in data["swipes"]] == [True, False, True]

    def test_mistakes_carry_explanation(self, swipe_definition, scheduler, results):
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        for _ in range(3):
            controller.classify("right")
            scheduler.advance(0.8)
        swipes = results[0].attempt_data["swipes"]
        assert swipes[1] == {
            "itemId": "s2",
            "statement": "The sun orbits the earth",
            "direction": "right",
            "correct": False,
            "explanation": "The earth orbits the sun.",
        }
        assert "explanation" not in swipes[0]

    def test_timestamps_use_session_clock(self, swipe_definition, scheduler, results):
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        scheduler.advance(2.5)
        controller.classify("right")
        assert controller.state.records[0].timestamp == 2.5

    def test_restart_clears_records(self, swipe_definition, scheduler, results):
        controller = make_controller(swipe_definition, scheduler, results)
        controller.start()
        controller.classify("right")
        assert controller.restart() is True
        assert controller.state.records == []
        assert controller.state.cursor == 0
        assert controller.state.can_undo is False
