from rich.console import Console
from rich.text import Text
from rich.panel import Panel
from ui.components import (
    AttemptsTable,
    FlashcardPanel,
    PairsBoard,
    ResultPanel,
    SplatPanel,
    SwipePanel,
)
from ui.styles import (
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    CONSOLE,
    create_welcome_banner,
)
from typing import Optional, List

from models import (
    AttemptRecord,
    FlashcardsState,
    GameDefinition,
    PairsState,
    SessionResult,
    SplatState,
    SwipeState,
)

GAME_LABELS = {
    "pairs": "Matching Pairs",
    "flashcards": "Flashcards",
    "splat": "Splat",
    "swipe": "True or False",
}


class GameUI:
    """Main UI orchestrator for the learning games."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or CONSOLE

    def show_welcome(self, definition: GameDefinition) -> None:
        """Display the welcome screen for a game and wait for Enter."""
        label = GAME_LABELS[definition.game_type.value]
        self.console.print(create_welcome_banner(label))
        self.console.print()
        self.console.print(Text(definition.name, style="title"))
        if definition.description:
            self.console.print(Text(definition.description, style="subtitle"))
        self.console.print(
            Text(f"{len(definition.entries)} items", style=f"{MUTED_GRAY}")
        )
        self.console.print()
        self.console.input(Text("Press Enter to start...", style=f"bold {MUTED_GRAY}"))

    def show_pairs(self, state: PairsState, title: str, total_pairs: int) -> None:
        self.console.print(PairsBoard(state, title, total_pairs))

    def show_flashcard(self, state: FlashcardsState, title: str) -> None:
        self.console.print(FlashcardPanel(state, title))

    def show_splat(
        self, state: SplatState, title: str, showing_correct_answer: bool = False
    ) -> None:
        self.console.print(SplatPanel(state, title, showing_correct_answer))

    def show_swipe(
        self, state: SwipeState, title: str, last_correct: Optional[bool] = None
    ) -> None:
        self.console.print(SwipePanel(state, title, last_correct))

    def show_result(
        self,
        definition: GameDefinition,
        result: SessionResult,
        best: Optional[AttemptRecord] = None,
    ) -> None:
        """Display the summary of a completed session, with the personal best."""
        self.console.print(
            ResultPanel(definition.game_type, result, definition.name, best)
        )
        self.console.print()

    def show_attempts(self, attempts: List[AttemptRecord]) -> None:
        if not attempts:
            self.show_info("No attempts recorded yet.")
            return
        self.console.print(AttemptsTable(attempts))

    def prompt(self, label: str = "Your move: ") -> str:
        """Read one line of player input, lowercased and stripped."""
        return (
            self.console.input(Text(label, style=f"bold {MUTED_GRAY}")).strip().lower()
        )

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question; anything but y/yes is a no."""
        answer = self.prompt(f"{question} [y/N]: ")
        return answer in ("y", "yes")

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Unable to load: {message}", style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_invalid(self, message: str) -> None:
        self.console.print(Text(f"{message}\n", style=ERROR_RED))

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_quit_message(self, saved: bool = False) -> None:
        """Display the quit message."""
        self.console.print()
        message = "👋 Goodbye!"
        if saved:
            message += " Your progress has been saved."
        self.console.print(Text(message, style=MUTED_GRAY))

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()
