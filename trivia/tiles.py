"""
Board tile definitions and title parsing.

Effect parameters (amount, target, kind) are attached to each tile when it
is built. ``tile_from_title`` derives them once from the display title.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

STAR = "⭐"

_STAR_AMOUNT = re.compile(STAR + r"\s*(\d+)")

BANKRUPT_KEYWORDS = ("BANKRUPT", "İFLAS", "IFLAS")

QUESTION_CATEGORIES = (
    "WHO AM I?",
    "FIRSTS IN TURKISH LITERATURE",
    "WORK & CHARACTER",
    "LITERARY MOVEMENTS",
    "LITERARY DEVICES",
)

START_TITLE = "START"
BONUS_TITLE = "BONUS"


class TileType(Enum):
    """Types of tiles on the board."""

    START = "start"
    QUESTION = "question"
    BONUS = "bonus"
    PENALTY = "penalty"
    BANKRUPT = "bankrupt"
    SPECIAL = "special"


class EffectKind(Enum):
    """What happens when a pawn lands on a tile."""

    NONE = "none"
    BANKRUPT = "bankrupt"
    QUESTION = "question"
    BONUS_QUESTION = "bonus_question"
    TAKE_FROM = "take_from"
    GIVE_TO = "give_to"
    GIVE_TO_ALL = "give_to_all"
    LOSE = "lose"
    INFO = "info"


class TargetRule(Enum):
    """Which other player a transfer tile points at, relative to the mover."""

    OPPOSITE = "opposite"
    RIGHT = "right"
    LEFT = "left"

    def resolve(self, mover_index: int, player_count: int) -> int:
        if self is TargetRule.OPPOSITE:
            return (mover_index + player_count // 2) % player_count
        if self is TargetRule.RIGHT:
            return (mover_index + 1) % player_count
        return (mover_index - 1) % player_count


_TARGET_KEYWORDS = (
    ("OPPOSITE", TargetRule.OPPOSITE),
    ("RIGHT", TargetRule.RIGHT),
    ("LEFT", TargetRule.LEFT),
)


@dataclass(frozen=True)
class BoardTile:
    """A single board cell. Never mutated after the board is built."""

    index: int
    title: str
    tile_type: TileType
    effect: EffectKind = EffectKind.NONE
    amount: int = 0
    target: Optional[TargetRule] = None

    @property
    def title_denotes_bankruptcy(self) -> bool:
        return is_bankrupt_title(self.title)

    def __repr__(self) -> str:
        return f"BoardTile(index={self.index}, title='{self.title}', type={self.tile_type.value})"


def normalize_title(title: str) -> str:
    return title.strip().upper()


def is_bankrupt_title(title: str) -> bool:
    normalized = normalize_title(title)
    return any(keyword in normalized for keyword in BANKRUPT_KEYWORDS)


def parse_star_amount(title: str) -> int:
    """Star amount encoded in a title, or 0 when none can be parsed."""
    match = _STAR_AMOUNT.search(title)
    return int(match.group(1)) if match else 0


def parse_target(title: str) -> Optional[TargetRule]:
    normalized = normalize_title(title)
    for keyword, rule in _TARGET_KEYWORDS:
        if keyword in normalized:
            return rule
    return None


def tile_from_title(index: int, title: str) -> BoardTile:
    """Classify a tile and extract its effect parameters from the title."""
    normalized = normalize_title(title)
    amount = parse_star_amount(title)
    target = parse_target(title)
    has_star = STAR in normalized

    if normalized == START_TITLE:
        return BoardTile(index, title, TileType.START)
    if is_bankrupt_title(title):
        return BoardTile(index, title, TileType.BANKRUPT, EffectKind.BANKRUPT)
    if normalized == BONUS_TITLE:
        return BoardTile(index, title, TileType.BONUS, EffectKind.BONUS_QUESTION)

    if has_star and "GIVE" in normalized:
        if "EVERYONE" in normalized:
            return BoardTile(index, title, TileType.SPECIAL, EffectKind.GIVE_TO_ALL, amount)
        if target is not None:
            return BoardTile(index, title, TileType.SPECIAL, EffectKind.GIVE_TO, amount, target)
        return BoardTile(index, title, TileType.PENALTY, EffectKind.LOSE, amount)
    if has_star and "LOSE" in normalized:
        return BoardTile(index, title, TileType.PENALTY, EffectKind.LOSE, amount)
    if has_star and "TAKE" in normalized:
        return BoardTile(index, title, TileType.BONUS, EffectKind.TAKE_FROM, amount, target)

    if normalized in QUESTION_CATEGORIES:
        return BoardTile(index, title, TileType.QUESTION, EffectKind.QUESTION)
    if "BONUS QUESTION" in normalized:
        return BoardTile(index, title, TileType.SPECIAL, EffectKind.INFO)
    return BoardTile(index, title, TileType.SPECIAL)
