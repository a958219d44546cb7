"""
Custom exception hierarchy for the trivia engine and server.

Engine commands never raise for invalid use (they are rejected silently),
so these errors only surface while building a game or looking one up.
"""


class TriviaError(Exception):
    """Base exception for all game-related errors."""


class GameNotFoundError(TriviaError):
    """Game does not exist."""


class InvalidSetupError(TriviaError, ValueError):
    """Player list or game options cannot start a game."""


class InvalidQuestionError(TriviaError, ValueError):
    """Question does not have exactly four options and a valid answer."""


class InvalidBoardError(TriviaError, ValueError):
    """Board definition is not a 40 tile loop."""
