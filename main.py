import argparse
import logging
import random
import sqlite3
import time
from pathlib import Path

from rich.console import Console

from engine import (
    FlashcardsController,
    PairsController,
    SessionController,
    SplatController,
    SwipeController,
    create_controller,
)
from models import ContentLoadError, GameDefinition, GameType, load_definition_file
from storage import (
    DEFAULT_DB_PATH,
    StorageError,
    get_attempt_repo,
    get_session_store,
    init_schema,
)
from ui import GameUI

logger = logging.getLogger(__name__)

QUIT = "q"


class WallClock:
    """Real time, in seconds."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class GameRunner:
    """Drives a controller's scheduler from a clock between player inputs.

    The terminal blocks on input, so the scheduler is caught up to the clock
    before each action is applied, and deferred transitions are waited out
    after it.
    """

    def __init__(self, ui: GameUI, controller: SessionController, clock=None):
        self.ui = ui
        self.controller = controller
        self.clock = clock or WallClock()
        self.origin = self.clock.now() - controller.scheduler.now

    def sync(self) -> None:
        """Run everything that fell due while the player was thinking."""
        self.controller.scheduler.advance_to(self.clock.now() - self.origin)

    def settle(self, render=None) -> None:
        """Wait until no deferred transition is pending, re-rendering after each."""
        while self.controller.is_running:
            pending = self.controller.pending_continuations
            if not pending:
                return
            due = pending[0].when
            wait = self.origin + due - self.clock.now()
            if wait > 0:
                self.clock.sleep(wait)
            # Clock arithmetic may land a hair short of the due time
            self.controller.scheduler.advance_to(
                max(due, self.clock.now() - self.origin)
            )
            if render is not None and self.controller.is_running:
                render()

    def read(self, label: str = "Your move: ") -> str:
        action = self.ui.prompt(label)
        self.sync()
        return action

    def quit(self) -> None:
        self.sync()
        self.controller.exit()


# ============================================================================
# Per-game play loops
# ============================================================================


def play_pairs(runner: GameRunner, controller: PairsController) -> None:
    ui = runner.ui
    title = controller.definition.name

    def render():
        ui.show_pairs(controller.state, title, controller.total_pairs)

    while controller.is_running:
        render()
        action = runner.read("Card number: ")
        if action == QUIT:
            runner.quit()
            return
        count = len(controller.state.cards)
        number = int(action) if action.isdecimal() else 0
        if not 1 <= number <= count:
            ui.show_invalid(f"Please enter a card number 1-{count}")
            continue
        if controller.flip(controller.state.cards[number - 1].card_id) and (
            controller.state.resolving
        ):
            render()
            runner.settle()


def play_flashcards(runner: GameRunner, controller: FlashcardsController) -> None:
    ui = runner.ui
    title = controller.definition.name

    def render():
        ui.show_flashcard(controller.state, title)

    while controller.is_running:
        render()
        action = runner.read()
        if action == QUIT:
            runner.quit()
            return
        if action == "f":
            controller.flip()
        elif action == "n":
            controller.next()
        elif action == "p":
            controller.previous()
        elif action in ("1", "2"):
            if not controller.assess(action == "1"):
                ui.show_invalid("Flip the card first. Each card is graded once.")
                continue
            render()
            runner.settle()
        elif action == "s":
            if controller.state.assessed_count > 0 or controller.state.review_mode:
                ui.show_invalid("Shuffling is only possible before any card is graded.")
            elif ui.confirm("Shuffle the deck and start over?"):
                controller.shuffle_restart()
        else:
            ui.show_invalid("Use f, n, p, 1, 2, s or q.")


def play_splat(runner: GameRunner, controller: SplatController) -> None:
    ui = runner.ui
    title = controller.definition.name

    def render():
        ui.show_splat(controller.state, title, controller.showing_correct_answer)

    while controller.is_running:
        render()
        action = runner.read("Your answer: ")
        if action == QUIT:
            runner.quit()
            return
        options = controller.state.options
        index = ord(action[0]) - ord("a") if len(action) == 1 else -1
        if 0 <= index < len(options):
            controller.answer(options[index])
        elif controller.state.phase.value == "active":
            letters = ", ".join(chr(65 + i) for i in range(len(options)))
            ui.show_invalid(f"Please enter one of {letters}")
            continue
        # A timeout caught up by the clock sync also lands here
        if controller.pending_continuations:
            render()
            runner.settle(render)


def play_swipe(runner: GameRunner, controller: SwipeController) -> None:
    ui = runner.ui
    title = controller.definition.name

    def render():
        ui.show_swipe(controller.state, title, controller.last_correct)

    while controller.is_running:
        render()
        action = runner.read()
        if action == QUIT:
            runner.quit()
            return
        if action in ("l", "r"):
            if not controller.classify("left" if action == "l" else "right"):
                continue
            render()
            # Undo is only possible while the feedback is showing
            follow_up = runner.read("Press Enter to continue or 'u' to undo: ")
            if follow_up == QUIT:
                runner.quit()
                return
            if follow_up == "u":
                if controller.undo():
                    continue
                ui.show_invalid("Too late to undo.")
            runner.settle()
        else:
            ui.show_invalid("Use r (true), l (false) or q.")


PLAY_LOOPS = {
    GameType.PAIRS: play_pairs,
    GameType.FLASHCARDS: play_flashcards,
    GameType.SPLAT: play_splat,
    GameType.SWIPE: play_swipe,
}


# ============================================================================
# Commands
# ============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="Learning Games")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Play a game from a JSON file")
    play_parser.add_argument("path", type=Path, help="Path to the game JSON file")
    play_parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})",
    )
    play_parser.add_argument(
        "--fresh",
        action="store_true",
        help="Ignore saved flashcard progress and start over",
    )
    play_parser.add_argument(
        "--shuffle",
        action="store_true",
        help="Shuffle flashcards before starting",
    )
    play_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    play_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log session events",
    )

    attempts_parser = subparsers.add_parser("attempts", help="List recorded attempts")
    attempts_parser.add_argument(
        "--game", type=str, default=None, help="Only show attempts at this game name"
    )
    attempts_parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})",
    )

    return parser


def open_database(db_path: Path) -> bool:
    """Make sure the schema exists. Games are still playable without it."""
    try:
        init_schema(db_path)
    except (sqlite3.Error, OSError) as e:
        logger.warning(
            "Database %s unavailable, attempts will not be saved: %s", db_path, e
        )
        return False
    return True


def offer_next_round(ui: GameUI, controller: SessionController) -> bool:
    """After a completed session, start another round if the player wants one."""
    if isinstance(controller, FlashcardsController) and controller.state.unknown_count:
        if ui.confirm(
            f"Review the {controller.state.unknown_count} card(s) you're still learning?"
        ):
            return controller.review_unknown()
    if ui.confirm("Play again?"):
        return controller.restart()
    return False


def run_play(args, console: Console | None = None, clock=None) -> int:
    """Run the play subcommand."""
    ui = GameUI(console)

    try:
        definition: GameDefinition = load_definition_file(args.path)
    except ContentLoadError as e:
        ui.show_error(str(e))
        return 1

    has_db = open_database(args.db)
    store = get_session_store(args.db) if has_db else None
    repo = get_attempt_repo(args.db) if has_db else None

    def record_attempt(result) -> None:
        if repo is None:
            return
        try:
            repo.record(definition, result)
        except StorageError as e:
            logger.warning("Could not record attempt: %s", e)
            ui.show_info("Your result could not be saved.")

    def personal_best():
        if repo is None:
            return None
        try:
            return repo.best_attempt(definition.name)
        except StorageError as e:
            logger.warning("Could not load personal best: %s", e)
            return None

    rng = random.Random(args.seed) if args.seed is not None else None
    controller = create_controller(
        definition,
        on_complete=record_attempt,
        rng=rng,
        store=store,
        shuffle_cards=args.shuffle,
    )

    ui.clear_screen()
    ui.show_welcome(definition)

    try:
        if isinstance(controller, FlashcardsController):
            if not args.fresh and controller.saved_progress() is not None:
                ui.show_info("Resuming where you left off.")
            controller.start(resume=not args.fresh)
        else:
            controller.start()
    except ContentLoadError as e:
        ui.show_error(str(e))
        return 1

    runner = GameRunner(ui, controller, clock)
    play = PLAY_LOOPS[definition.game_type]
    try:
        while True:
            play(runner, controller)
            if controller.exited or controller.result is None:
                break
            ui.show_result(definition, controller.result, personal_best())
            if not offer_next_round(ui, controller):
                break
    except (KeyboardInterrupt, EOFError):
        controller.exit()

    if controller.exited:
        saved = isinstance(controller, FlashcardsController) and store is not None
        ui.show_quit_message(saved=saved)
    return 0


def run_attempts(args, console: Console | None = None) -> int:
    """Run the attempts subcommand."""
    ui = GameUI(console)
    if not open_database(args.db):
        ui.show_info("No attempts recorded yet.")
        return 0
    try:
        attempts = get_attempt_repo(args.db).list_attempts(args.game)
    except StorageError as e:
        logger.warning("Could not list attempts: %s", e)
        ui.show_info("Attempts are unavailable.")
        return 1
    ui.show_attempts(attempts)
    return 0


def main(argv=None) -> int:
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if getattr(args, "verbose", False):
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if args.command == "play":
        return run_play(args)
    if args.command == "attempts":
        return run_attempts(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
