from rich.theme import Theme
from rich.console import Console
from rich.style import Style
from rich.text import Text

GAME_PURPLE = "#8E44AD"
GAME_ORANGE = "#E67E22"
SUCCESS_GREEN = "#27AE60"
ERROR_RED = "#C0392B"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=GAME_PURPLE, bold=True),
        "secondary": Style(color=GAME_ORANGE, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "card_hidden": Style(color=MUTED_GRAY),
        "card_flipped": Style(color=GAME_ORANGE, bold=True),
        "card_matched": Style(color=SUCCESS_GREEN, bold=True),
        "option_label": Style(color=GAME_ORANGE, bold=True),
        "option_text": Style(color=TEXT_WHITE),
        "title": Style(color=GAME_PURPLE, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
    }
)

CONSOLE = Console(theme=DEFAULT_THEME)


def get_score_style(score_percentage: float) -> Style:
    """Get color style based on a session score."""
    if score_percentage >= 75:
        return Style(color=SUCCESS_GREEN, bold=True)
    elif score_percentage >= 50:
        return Style(color=GAME_ORANGE)
    else:
        return Style(color=ERROR_RED)


def get_countdown_style(time_left: int) -> Style:
    """Get style for the timed-reaction countdown; urgent in the last seconds."""
    if time_left <= 3:
        return Style(color=ERROR_RED, bold=True)
    return Style(color=INFO_BLUE)


def create_welcome_banner(game_label: str) -> Text:
    """Create the welcome banner text."""
    banner = Text()
    banner.append(
        "╔══════════════════════════════════════╗\n", Style(color=GAME_PURPLE)
    )
    banner.append(f"║ {'Learning Games':^36} ║\n", Style(color=GAME_ORANGE, bold=True))
    banner.append(f"║ {game_label:^36} ║\n", Style(color=GAME_PURPLE))
    banner.append("╚══════════════════════════════════════╝", Style(color=GAME_PURPLE))
    return banner
