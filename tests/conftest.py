"""Shared test fixtures for the trivia engine tests."""

import random
from typing import Callable, Iterable, List, Optional

import pytest

from trivia.board import BOARD_SIZE
from trivia.config import GameConfig
from trivia.game import GameState, TurnPhase, create_game
from trivia.player import Player
from trivia.questions import Difficulty, Question
from trivia.scheduler import ManualScheduler


class ScriptedRandom(random.Random):
    """Random whose ``randint`` returns scripted values first, then seeded ones."""

    def __init__(self, values: Iterable[int] = (), seed: int = 0):
        super().__init__(seed)
        self.script: List[int] = list(values)

    def randint(self, a: int, b: int) -> int:
        if self.script:
            value = self.script.pop(0)
            assert a <= value <= b, f"scripted {value} outside [{a}, {b}]"
            return value
        return super().randint(a, b)


def make_question(n: int, bonus: bool = False, difficulty: Difficulty = Difficulty.EASY) -> Question:
    """Question whose correct option is always index 0."""
    kind = "Bonus" if bonus else "Regular"
    return Question(f"{kind} question {n}?", (f"right {n}", "wrong a", "wrong b", "wrong c"), 0, difficulty, bonus)


def make_questions(regular: int = 5, bonus: int = 2) -> List[Question]:
    return [make_question(i) for i in range(regular)] + [
        make_question(i, bonus=True, difficulty=Difficulty.HARD) for i in range(bonus)
    ]


def is_waiting(game: GameState) -> bool:
    return game.state.phase == TurnPhase.WAITING_FOR_DICE


def has_popup(game: GameState) -> bool:
    return game.state.pending_question is not None or game.state.pending_effect is not None


def move_to(game: GameState, player_index: int, position: int) -> None:
    """Force a player onto a tile through the developer move command."""
    player = game.players[player_index]
    delta = (position - player.position) % BOARD_SIZE
    game.force_move(player_index, delta)


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def two_players():
    """Two test players."""
    return [Player(0, "Alice"), Player(1, "Bob")]


@pytest.fixture
def three_players():
    return [Player(0, "Alice"), Player(1, "Bob"), Player(2, "Charlie")]


@pytest.fixture
def four_players():
    """Four test players."""
    return [
        Player(0, "Alice"),
        Player(1, "Bob"),
        Player(2, "Charlie"),
        Player(3, "Diana"),
    ]


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_game(scheduler, game_config, two_players) -> Callable[..., GameState]:
    """
    Factory for games that have finished the starting order.

    Starting rolls default to 6, 5, 4, 3 so the turn order equals the
    setup order. Extra ``dice`` values are used for later rolls.
    """

    def _make(
        players: Optional[List[Player]] = None,
        config: Optional[GameConfig] = None,
        dice: Iterable[int] = (),
        questions: Optional[List[Question]] = None,
        board=None,
        start: bool = True,
    ) -> GameState:
        players = players or two_players
        rolls = [6, 5, 4, 3][: len(players)] + list(dice)
        game = create_game(
            config or game_config,
            players,
            board=board,
            questions=make_questions() if questions is None else questions,
            scheduler=scheduler,
            rng=ScriptedRandom(rolls),
        )
        if start:
            assert scheduler.run_until(lambda: is_waiting(game))
        return game

    return _make


@pytest.fixture
def basic_game(make_game):
    """Two players waiting for the first roll."""
    return make_game()
