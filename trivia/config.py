"""
Game configuration settings.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Optional, Tuple


class GameMode(Enum):
    """How the length of a game is decided."""

    TURN_BASED = "turn_based"  # fixed number of full rounds
    QUESTION_BASED = "question_based"  # ends when the question pool is exhausted


DEFAULT_TURN_COUNT = 10
AVAILABLE_TURN_COUNTS: Tuple[int, ...] = (10, 15, 20)


@dataclass(frozen=True)
class Timings:
    """Delays (in seconds) between the engine's scheduled steps."""

    starting_roll: float = 0.8
    starting_tie: float = 1.0
    starting_message_clear: float = 1.5

    dice_first_tick: float = 0.05
    dice_tick_fast: float = 0.08
    dice_tick_slow: float = 0.12
    dice_ticks: int = 8
    dice_settle: float = 0.3

    move_first_step: float = 0.1
    move_step: float = 0.2
    landing_pause: float = 0.5
    highlight_clear: float = 0.5

    end_turn_no_effect: float = 0.8
    end_turn_with_effect: float = 1.5
    feedback_clear: float = 1.0

    sudden_death_round: float = 2.0
    watchdog: float = 0.5

    def scaled(self, factor: float) -> "Timings":
        """Return a copy with every delay multiplied by factor."""
        changes = {
            f.name: getattr(self, f.name) * factor
            for f in fields(self)
            if f.name != "dice_ticks"
        }
        return replace(self, **changes)


@dataclass(frozen=True)
class GameConfig:
    """Configuration for a trivia board game."""

    regular_question_points: int = 50
    bonus_question_points: int = 150
    initial_score: int = 0

    default_turn_count: int = DEFAULT_TURN_COUNT
    available_turn_counts: Tuple[int, ...] = AVAILABLE_TURN_COUNTS

    game_mode: GameMode = GameMode.TURN_BASED
    max_turns: Optional[int] = None

    min_players: int = 2
    max_players: int = 4

    seed: Optional[int] = None

    timings: Timings = field(default_factory=Timings)

    def resolved_max_turns(self) -> int:
        """Turn limit for turn-based games, falling back to the default."""
        if self.max_turns in self.available_turn_counts:
            return self.max_turns
        return self.default_turn_count
