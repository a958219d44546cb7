from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PlayerSetup(BaseModel):
    name: str = Field(min_length=1, max_length=40)
    color: Optional[str] = None
    icon: Optional[str] = None


class CreateGameRequest(BaseModel):
    # Player count is checked by the engine so the error carries its message.
    players: List[PlayerSetup]
    mode: str = Field("turns", pattern=r"^(turns|questions)$")
    max_turns: Optional[int] = None
    seed: Optional[int] = None


class CreateGameResponse(BaseModel):
    game_id: str


class CommandRequest(BaseModel):
    command: str
    option_index: Optional[int] = None
    player_index: Optional[int] = None
    tile_delta: Optional[int] = None


class CommandResponse(BaseModel):
    accepted: bool
    reason: Optional[str] = None


class GameStatus(BaseModel):
    game_id: str
    phase: str
    current_turn: int
    current_player_id: int
    is_game_ended: bool
    winner_id: Optional[int] = None
    subscribers: int
    events: int


class GameEventDTO(BaseModel):
    sequence_number: int
    event_type: str
    player_id: Optional[int] = None
    payload: Dict[str, Any] = Field(default_factory=dict)
