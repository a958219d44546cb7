"""
End-of-game ranking.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from trivia.player import PlayerState


@dataclass
class Ranking:
    """Result of comparing players at the end of a game."""

    standings: List[PlayerState]
    top_score_players: List[PlayerState]
    bonus_leaders: List[PlayerState]

    @property
    def winner(self) -> Optional[PlayerState]:
        """The outright winner, or None when a tie survives both comparisons."""
        if len(self.bonus_leaders) == 1:
            return self.bonus_leaders[0]
        return None

    @property
    def is_tied(self) -> bool:
        return len(self.bonus_leaders) > 1


def rank_players(players: Sequence[PlayerState]) -> Ranking:
    """
    Rank players by score, breaking score ties by correct bonus answers.

    Ties keep turn order, so ``bonus_leaders[0]`` is the first leader to
    play.
    """
    if not players:
        raise ValueError("Cannot rank an empty player list")

    standings = sorted(players, key=lambda p: (-p.score, -p.bonus_correct_count))
    top_score = standings[0].score
    top_score_players = [p for p in players if p.score == top_score]
    top_bonus = max(p.bonus_correct_count for p in top_score_players)
    bonus_leaders = [p for p in top_score_players if p.bonus_correct_count == top_bonus]
    return Ranking(standings, top_score_players, bonus_leaders)
