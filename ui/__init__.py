"""Learning Games UI Module - Terminal interface for playing the games."""

from ui.app import GameUI
from ui.components import (
    AttemptsTable,
    FlashcardPanel,
    PairsBoard,
    ResultPanel,
    SplatPanel,
    SwipePanel,
    format_clock,
    format_reaction,
)
from ui.styles import (
    GAME_PURPLE,
    GAME_ORANGE,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

__all__ = [
    "GameUI",
    "PairsBoard",
    "FlashcardPanel",
    "SplatPanel",
    "SwipePanel",
    "ResultPanel",
    "AttemptsTable",
    "format_clock",
    "format_reaction",
    "GAME_PURPLE",
    "GAME_ORANGE",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]
