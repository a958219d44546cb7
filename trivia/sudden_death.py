"""
Sudden-death tie-break between players who remain tied at the end.

Every round one shared question is put to each contender in turn. When the
round is over:

- exactly one correct answer wins the game;
- nobody correct replays the round with the same contenders;
- several correct answers send only those contenders to the next round.

Each new round uses a freshly drawn question, so the contender list never
grows and the duel ends with a single player.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from trivia.player import PlayerState
from trivia.questions import Question, QuestionPool

logger = logging.getLogger(__name__)


class RoundStep(Enum):
    """What the duel needs after an answer is closed."""

    NEXT_CONTENDER = "next_contender"
    NEXT_ROUND = "next_round"
    RESOLVED = "resolved"


@dataclass
class SuddenDeathState:
    """Public view of the duel for snapshots."""

    active: bool = False
    round: int = 0
    contender_ids: List[int] = field(default_factory=list)
    index: int = 0
    answers: Dict[int, bool] = field(default_factory=dict)
    winner_id: Optional[int] = None


class SuddenDeath:
    """Elimination duel state machine: active(round, contenders, index) -> resolved(winner)."""

    def __init__(self, contenders: Sequence[PlayerState], pool: QuestionPool):
        if len(contenders) < 2:
            raise ValueError("Sudden death needs at least two contenders")
        self.pool = pool
        self.contenders: List[PlayerState] = list(contenders)
        self.round = 1
        self.index = 0
        self.answers: Dict[int, bool] = {}
        self.question: Optional[Question] = None
        self.asked: List[Question] = []
        self.winner: Optional[PlayerState] = None
        self.contender_counts: List[int] = [len(self.contenders)]

    @property
    def is_resolved(self) -> bool:
        return self.winner is not None

    @property
    def current(self) -> PlayerState:
        return self.contenders[self.index]

    def round_question(self) -> Optional[Question]:
        """
        The question shared by everyone this round, drawn on first use.

        When no question exists at all the current contender wins, since the
        duel could never finish otherwise.
        """
        if self.question is None and not self.is_resolved:
            self.question = self.pool.draw_sudden_death(exclude=self.asked)
            if self.question is None:
                logger.info("No tie-break question available, %s wins by default", self.current.name)
                self.winner = self.current
            else:
                self.asked.append(self.question)
        return self.question

    def record(self, player_id: int, correct: bool) -> None:
        self.answers[player_id] = correct

    def advance(self) -> RoundStep:
        """Move past the current contender once their answer is closed."""
        if self.is_resolved:
            return RoundStep.RESOLVED

        self.index += 1
        if self.index < len(self.contenders):
            return RoundStep.NEXT_CONTENDER

        survivors = [p for p in self.contenders if self.answers.get(p.player_id, False)]
        if len(survivors) == 1:
            self.winner = survivors[0]
            return RoundStep.RESOLVED

        if survivors:
            self.contenders = survivors
        self.round += 1
        self.index = 0
        self.answers.clear()
        self.question = None
        self.contender_counts.append(len(self.contenders))
        logger.debug("Sudden death round %d with %d contenders", self.round, len(self.contenders))
        return RoundStep.NEXT_ROUND

    def state(self) -> SuddenDeathState:
        return SuddenDeathState(
            active=not self.is_resolved,
            round=self.round,
            contender_ids=[p.player_id for p in self.contenders],
            index=self.index,
            answers=dict(self.answers),
            winner_id=self.winner.player_id if self.winner else None,
        )
