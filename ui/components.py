from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.align import Align
from rich import box
from typing import Optional, List

from engine.results import performance_level, star_rating
from models import (
    AttemptRecord,
    FlashcardsState,
    GameType,
    PairsState,
    SessionResult,
    SplatState,
    SwipeState,
)
from ui.styles import (
    GAME_PURPLE,
    GAME_ORANGE,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    TEXT_WHITE,
    get_score_style,
    get_countdown_style,
)


def format_clock(seconds: int) -> str:
    """Format seconds as m:ss."""
    mins, secs = divmod(max(0, seconds), 60)
    return f"{mins}:{secs:02d}"


def format_reaction(ms: float) -> str:
    """Format a reaction time: milliseconds under a second, else seconds."""
    if ms < 1000:
        return f"{round(ms)}ms"
    return f"{ms / 1000:.2f}s"


def progress_bar(percent: float, width: int = 30) -> str:
    """Create a text-based progress bar."""
    filled = int(width * percent / 100)
    return "█" * filled + "░" * (width - filled)


class PairsBoard:
    """The grid of face-down, face-up and matched cards."""

    def __init__(self, state: PairsState, title: str, total_pairs: int):
        self.state = state
        self.title = title
        self.total_pairs = total_pairs

    def _columns(self) -> int:
        count = len(self.state.cards)
        if count <= 4:
            return 2
        if count <= 12:
            return 4
        return 6

    def render(self) -> Panel:
        columns = self._columns()
        grid = Table.grid(padding=(0, 2))
        for _ in range(columns):
            grid.add_column(justify="center", min_width=14)

        cells = []
        for number, card in enumerate(self.state.cards, start=1):
            if card.is_matched:
                cells.append(Text(f"{number}. {card.content}", style="card_matched"))
            elif card.is_flipped:
                cells.append(Text(f"{number}. {card.content}", style="card_flipped"))
            else:
                cells.append(Text(f"{number}. ▒▒▒▒", style="card_hidden"))
        for start in range(0, len(cells), columns):
            grid.add_row(*cells[start : start + columns])

        stats = Text()
        stats.append(
            f"Pairs {self.state.matched_pairs}/{self.total_pairs}   ",
            Style(color=SUCCESS_GREEN),
        )
        stats.append(f"Moves {self.state.moves}   ", Style(color=GAME_ORANGE))
        stats.append(format_clock(self.state.elapsed_seconds), Style(color=MUTED_GRAY))

        body = Table.grid()
        body.add_row(stats)
        body.add_row(Text(""))
        body.add_row(grid)

        return Panel(
            Align.left(body),
            title=self.title,
            subtitle="Enter a card number to flip it (or 'q' to quit)",
            border_style=GAME_PURPLE,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class FlashcardPanel:
    """The current flashcard, front or back, with deck progress."""

    def __init__(self, state: FlashcardsState, title: str):
        self.state = state
        self.title = title

    def render(self) -> Panel:
        state = self.state
        card = state.current_card
        total = len(state.cards)
        content = Text()

        if state.review_mode:
            content.append("Review Mode\n", Style(color=GAME_ORANGE, bold=True))
        content.append(
            f"[{progress_bar((state.cursor + 1) / total * 100)}]\n",
            Style(color=MUTED_GRAY),
        )
        content.append(
            f"Card {state.cursor + 1} of {total}   "
            f"Assessed: {state.assessed_count}/{total}   "
            f"{format_clock(state.elapsed_seconds)}\n\n",
            Style(color=MUTED_GRAY),
        )

        side = "Back" if state.showing_back else "Front"
        text = card.back if state.showing_back else card.front
        content.append(f"{side}\n", Style(color=MUTED_GRAY))
        content.append(text, Style(color=GAME_PURPLE, bold=True))

        known = state.current_progress.known
        if known is not None:
            content.append("\n\n")
            if known:
                content.append("✓ Known", Style(color=SUCCESS_GREEN, bold=True))
            else:
                content.append("✗ Still learning", Style(color=ERROR_RED, bold=True))

        return Panel(
            Align.left(content),
            title=self.title,
            subtitle="f flip · n/p next/prev · 1 know it · 2 still learning · s shuffle · q quit",
            border_style=GAME_PURPLE,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class SplatPanel:
    """The active question, its answer choices and the countdown."""

    def __init__(
        self,
        state: SplatState,
        title: str,
        showing_correct_answer: bool = False,
    ):
        self.state = state
        self.title = title
        self.showing_correct_answer = showing_correct_answer

    def render(self) -> Panel:
        state = self.state
        item = state.current_item
        content = Text()
        content.append(
            f"Question {state.index + 1}/{len(state.items)}   "
            f"Score: {state.total_points}   ",
            Style(color=MUTED_GRAY),
        )
        content.append(f"⏱ {state.time_left}s\n\n", get_countdown_style(state.time_left))
        content.append(item.question, Style(color=GAME_PURPLE, bold=True))
        content.append("\n\n")

        for i, option in enumerate(state.options):
            style = Style(color=TEXT_WHITE)
            if self.showing_correct_answer and option == item.answer:
                style = Style(color=SUCCESS_GREEN, bold=True)
            elif option == state.selected:
                style = Style(
                    color=SUCCESS_GREEN if option == item.answer else ERROR_RED,
                    bold=True,
                )
            content.append(f"{chr(65 + i)}. ", Style(color=GAME_ORANGE, bold=True))
            content.append(option, style)
            content.append("\n")

        return Panel(
            Align.left(content),
            title=self.title,
            subtitle="Type the letter of your answer (or 'q' to quit)",
            border_style=GAME_ORANGE,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class SwipePanel:
    """The current statement, or feedback on the last swipe."""

    def __init__(
        self,
        state: SwipeState,
        title: str,
        last_correct: Optional[bool] = None,
    ):
        self.state = state
        self.title = title
        self.last_correct = last_correct

    def render(self) -> Panel:
        state = self.state
        total = len(state.items)
        content = Text()
        content.append(
            f"Question {min(state.cursor + 1, total)} of {total}   "
            f"Score: {state.correct_count}/{total}   "
            f"{format_clock(state.elapsed_seconds)}\n\n",
            Style(color=MUTED_GRAY),
        )

        if state.phase.value == "feedback":
            if self.last_correct:
                content.append("✓ Correct!", Style(color=SUCCESS_GREEN, bold=True))
            else:
                content.append("✗ Incorrect", Style(color=ERROR_RED, bold=True))
        elif state.current_item is not None:
            content.append(state.current_item.statement, Style(color=GAME_PURPLE, bold=True))

        undo_hint = " · u undo" if state.can_undo else ""
        return Panel(
            Align.left(content),
            title=self.title,
            subtitle=f"r true · l false{undo_hint} · q quit",
            border_style=GAME_PURPLE,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ResultPanel:
    """Summary of a completed session."""

    def __init__(
        self,
        game_type: GameType,
        result: SessionResult,
        game_name: str,
        best: Optional[AttemptRecord] = None,
    ):
        self.game_type = game_type
        self.result = result
        self.game_name = game_name
        self.best = best

    def _details(self) -> List[tuple[str, str]]:
        data = self.result.attempt_data
        rows = [("Time", format_clock(self.result.time_taken_seconds))]
        if self.game_type == GameType.PAIRS:
            stars = star_rating(data["moves"], data["pairs"])
            rows += [
                ("Moves", str(data["moves"])),
                ("Pairs", str(data["pairs"])),
                ("Rating", "★" * stars + "☆" * (3 - stars)),
            ]
            if data["perfectGame"]:
                rows.append(("Perfect game", "yes"))
        elif self.game_type == GameType.FLASHCARDS:
            rows += [
                ("Known", f"{data['knownCards']}/{data['totalCards']}"),
                ("Still learning", str(data["unknownCards"])),
            ]
        elif self.game_type == GameType.SPLAT:
            rows += [
                ("Correct", f"{data['correctAnswers']}/{data['totalQuestions']}"),
                ("Points", str(data["totalScore"])),
                ("Average reaction", format_reaction(data["averageReactionTime"])),
                ("Fastest reaction", format_reaction(data["fastestReaction"])),
            ]
        else:
            rows += [
                ("Correct", f"{data['correctSwipes']}/{data['totalQuestions']}"),
                ("Incorrect", str(data["incorrectSwipes"])),
            ]
        if self.best is not None:
            rows.append(
                (
                    "Personal best",
                    f"{self.best.score_percentage:.0f}% in "
                    f"{format_clock(self.best.time_taken_seconds)}",
                )
            )
        return rows

    def render(self) -> Panel:
        score = self.result.score_percentage
        level = performance_level(self.game_type, score)

        header = Text()
        header.append(f"{level.emoji} {level.label}\n", Style(color=GAME_PURPLE, bold=True))
        header.append(f"{score:.0f}%", get_score_style(score))

        table = Table(show_header=False, border_style=MUTED_GRAY, box=box.ROUNDED)
        table.add_column("Label", style=Style(color=MUTED_GRAY))
        table.add_column("Value", justify="right", style=Style(color=TEXT_WHITE))
        for label, value in self._details():
            table.add_row(label, value)

        body = Table.grid()
        body.add_row(Align.center(header))
        body.add_row(Text(""))
        body.add_row(Align.center(table))

        mistakes = [
            s for s in self.result.attempt_data.get("swipes", []) if not s["correct"]
        ]
        if mistakes:
            review = Text("\nReview your mistakes:\n", Style(color=GAME_ORANGE, bold=True))
            for swipe in mistakes:
                review.append(f"• {swipe['statement']}\n", Style(color=TEXT_WHITE))
                if swipe.get("explanation"):
                    review.append(f"  {swipe['explanation']}\n", Style(color=MUTED_GRAY))
            body.add_row(review)

        return Panel(
            body,
            title=f"{self.game_name} · Complete",
            border_style=SUCCESS_GREEN,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class AttemptsTable:
    """A table of recorded attempts."""

    def __init__(self, attempts: List[AttemptRecord]):
        self.attempts = attempts

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=GAME_PURPLE, bold=True),
            border_style=MUTED_GRAY,
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )
        table.add_column("Game", style=Style(color=GAME_PURPLE, bold=True))
        table.add_column("Type", style=Style(color=TEXT_WHITE))
        table.add_column("Score", justify="center")
        table.add_column("Time", justify="center", style=Style(color=INFO_BLUE))
        table.add_column("Completed", style=Style(color=MUTED_GRAY))

        for attempt in self.attempts:
            table.add_row(
                attempt.game_name,
                attempt.game_type.value,
                Text(
                    f"{attempt.score_percentage:.0f}%",
                    style=get_score_style(attempt.score_percentage),
                ),
                format_clock(attempt.time_taken_seconds),
                attempt.completed_at.strftime("%Y-%m-%d %H:%M"),
            )

        return Panel(
            Align.center(table),
            title="Attempts",
            border_style=GAME_ORANGE,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()
