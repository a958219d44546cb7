"""
Player state and management.
"""

from typing import Optional


class PlayerState:
    """Mutable per-player state. Only the engine writes to it."""

    def __init__(
        self,
        player_id: int,
        name: str,
        initial_score: int = 0,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ):
        self.player_id = player_id
        self.name = name
        self.color = color
        self.icon = icon
        self.position = 0
        self.score = initial_score
        self.bankrupt_count = 0
        self.bonus_correct_count = 0

    def reset(self, initial_score: int = 0) -> None:
        """Return to the state of a freshly created player."""
        self.position = 0
        self.score = initial_score
        self.bankrupt_count = 0
        self.bonus_correct_count = 0

    def __repr__(self) -> str:
        return (
            f"PlayerState(id={self.player_id}, name='{self.name}', "
            f"score={self.score}, position={self.position}, "
            f"bankruptcies={self.bankrupt_count}, bonus_correct={self.bonus_correct_count})"
        )


class Player:
    """
    Setup information for a player.
    Color and icon are cosmetic and passed through untouched.
    """

    def __init__(self, player_id: int, name: str, color: Optional[str] = None, icon: Optional[str] = None):
        self.player_id = player_id
        self.name = name
        self.color = color
        self.icon = icon

    def __repr__(self) -> str:
        return f"Player(id={self.player_id}, name='{self.name}')"
