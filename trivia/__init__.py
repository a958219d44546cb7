"""
Literature trivia board game engine.
"""

from trivia.board import BOARD_SIZE, Board
from trivia.config import GameConfig, GameMode, Timings
from trivia.events import EventLog, EventType, GameEvent
from trivia.exceptions import (
    GameNotFoundError,
    InvalidBoardError,
    InvalidQuestionError,
    InvalidSetupError,
    TriviaError,
)
from trivia.game import EngineState, GameState, PendingQuestion, TurnPhase, create_game
from trivia.player import Player, PlayerState
from trivia.questions import Difficulty, Question, QuestionPool, create_question_bank
from trivia.scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from trivia.tiles import BoardTile, EffectKind, TileType

__all__ = [
    "BOARD_SIZE",
    "AsyncioScheduler",
    "Board",
    "BoardTile",
    "Difficulty",
    "EffectKind",
    "EngineState",
    "EventLog",
    "EventType",
    "GameConfig",
    "GameEvent",
    "GameMode",
    "GameNotFoundError",
    "GameState",
    "InvalidBoardError",
    "InvalidQuestionError",
    "InvalidSetupError",
    "ManualScheduler",
    "PendingQuestion",
    "Player",
    "PlayerState",
    "Question",
    "QuestionPool",
    "Scheduler",
    "TileType",
    "Timings",
    "TriviaError",
    "TurnPhase",
    "create_game",
    "create_question_bank",
]
