"""
Game event logging.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EventType(Enum):
    """Types of game events."""

    GAME_START = "game_start"
    STARTING_ROLL = "starting_roll"
    STARTING_TIE = "starting_tie"
    STARTING_ORDER = "starting_order"

    TURN_START = "turn_start"
    DICE_ROLL = "dice_roll"
    MOVE = "move"
    LAND = "land"

    TILE_EFFECT = "tile_effect"
    BANKRUPTCY = "bankruptcy"
    TRANSFER = "transfer"

    QUESTION_ASKED = "question_asked"
    QUESTION_ANSWERED = "question_answered"
    QUESTIONS_RECYCLED = "questions_recycled"

    WATCHDOG_RELEASE = "watchdog_release"

    SUDDEN_DEATH_START = "sudden_death_start"
    SUDDEN_DEATH_ROUND = "sudden_death_round"
    GAME_END = "game_end"
    RESTART = "restart"


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    player_id: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"event_type": self.event_type.value}
        if self.player_id is not None:
            data["player_id"] = self.player_id
        data.update(self.details)
        return data

    def __repr__(self) -> str:
        player_str = f"P{self.player_id}" if self.player_id is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.details}"


class EventLog:
    """Manages the game event log."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def log(self, event_type: EventType, player_id: Optional[int] = None, **details: Any) -> None:
        """Log a game event."""
        self.events.append(GameEvent(event_type, player_id, details))

    def since(self, index: int) -> List[GameEvent]:
        """Events logged at or after position index."""
        return self.events[max(index, 0):]

    def of_type(self, event_type: EventType) -> List[GameEvent]:
        return [e for e in self.events if e.event_type == event_type]
