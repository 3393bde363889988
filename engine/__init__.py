"""Game session engine for the learning games.

Each game type has a controller that owns a session's state, clock and
pending transitions, and emits one normalized result when it completes.

Controllers:
- PairsController: flip cards to find matching pairs
- FlashcardsController: review cards and grade recall, resumable
- SplatController: timed multiple-choice reaction questions
- SwipeController: classify statements as true or false, with undo

Shared pieces:
- shuffle, sample_distinct: randomized ordering
- Scheduler: cooperative clock driving ticks and settle delays
- normalize_result: the result contract
- EngineConfig: timing and scoring configuration
"""

import random

from engine.base import ResultSink, SessionController
from engine.clock import ScheduledTask, Scheduler
from engine.config import (
    EngineConfig,
    FlashcardsConfig,
    PairsConfig,
    SplatConfig,
    SwipeConfig,
)
from engine.flashcards import FlashcardsController
from engine.pairs import PairsController
from engine.results import (
    PerformanceLevel,
    normalize_result,
    percentage,
    performance_level,
    star_rating,
)
from engine.shuffle import sample_distinct, shuffle
from engine.splat import SplatController, calculate_points
from engine.swipe import SwipeController
from models import GameDefinition, GameType
from storage.base import SessionStore

__all__ = [
    # Controllers
    "SessionController",
    "PairsController",
    "FlashcardsController",
    "SplatController",
    "SwipeController",
    "CONTROLLERS",
    "create_controller",
    # Timing
    "Scheduler",
    "ScheduledTask",
    # Results
    "ResultSink",
    "PerformanceLevel",
    "normalize_result",
    "percentage",
    "performance_level",
    "star_rating",
    "calculate_points",
    # Utilities
    "shuffle",
    "sample_distinct",
    # Configuration
    "EngineConfig",
    "PairsConfig",
    "FlashcardsConfig",
    "SplatConfig",
    "SwipeConfig",
]

# Registry of controller classes by game type
CONTROLLERS: dict[GameType, type[SessionController]] = {
    GameType.PAIRS: PairsController,
    GameType.FLASHCARDS: FlashcardsController,
    GameType.SPLAT: SplatController,
    GameType.SWIPE: SwipeController,
}


def create_controller(
    definition: GameDefinition,
    *,
    scheduler: Scheduler | None = None,
    on_complete: ResultSink | None = None,
    rng: random.Random | None = None,
    config: EngineConfig | None = None,
    store: SessionStore | None = None,
    shuffle_cards: bool = False,
) -> SessionController:
    """Create the controller for a definition's game type.

    Args:
        definition: Validated game content.
        scheduler: Clock to run on; each controller gets its own by default.
        on_complete: Receives the result when the session completes.
        rng: Random source for shuffles and distractors.
        config: Engine configuration; defaults apply when omitted.
        store: Durable store for resumable sessions (flashcards only).
        shuffle_cards: Start flashcard sessions shuffled.

    Returns:
        A controller in the not_started state.
    """
    config = config or EngineConfig()
    common = {
        "scheduler": scheduler,
        "on_complete": on_complete,
        "rng": rng,
        "tick_interval": config.tick_interval,
    }
    controller_class = CONTROLLERS[definition.game_type]
    # Config sections are named after the game types they tune
    common["config"] = getattr(config, definition.game_type.value)
    if controller_class is FlashcardsController:
        common["store"] = store
        common["shuffle_cards"] = shuffle_cards
    return controller_class(definition, **common)
