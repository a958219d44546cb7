"""Simulated players that answer questions for headless games."""

import random
from abc import ABC, abstractmethod
from typing import Optional

from trivia.questions import Question


class Agent(ABC):
    """
    Abstract base class for trivia agents.

    The engine decides everything except which option is picked, so an
    agent only has to answer questions.

    Attributes:
        player_id: The player's id in the game.
        name: The player's display name.
    """

    def __init__(self, player_id: int, name: str):
        self.player_id = player_id
        self.name = name

    @abstractmethod
    def choose_answer(self, question: Question) -> int:
        """
        Pick an option for the question.

        Args:
            question: The pending question.

        Returns:
            Index of the chosen option.
        """


class RandomAgent(Agent):
    """Picks any option uniformly at random."""

    def __init__(self, player_id: int, name: str, seed: Optional[int] = None):
        super().__init__(player_id, name)
        self.rng = random.Random(seed)

    def choose_answer(self, question: Question) -> int:
        return self.rng.randrange(len(question.options))


class SkilledAgent(Agent):
    """Knows the answer with a fixed probability, otherwise picks a wrong option."""

    def __init__(self, player_id: int, name: str, accuracy: float = 0.7, seed: Optional[int] = None):
        super().__init__(player_id, name)
        if not 0.0 <= accuracy <= 1.0:
            raise ValueError(f"accuracy must be within [0, 1], got {accuracy}")
        self.accuracy = accuracy
        self.rng = random.Random(seed)

    def choose_answer(self, question: Question) -> int:
        if self.rng.random() < self.accuracy:
            return question.correct_index
        wrong = [i for i in range(len(question.options)) if i != question.correct_index]
        return self.rng.choice(wrong)
