"""
Tests for the board layout and tile classification.
"""

import pytest

from trivia.board import BOARD_SIZE, STANDARD_TITLES, Board
from trivia.exceptions import InvalidBoardError
from trivia.tiles import (
    BoardTile,
    EffectKind,
    TargetRule,
    TileType,
    is_bankrupt_title,
    parse_star_amount,
    tile_from_title,
)


def test_standard_board_layout():
    board = Board()

    assert len(board.tiles) == BOARD_SIZE
    assert [t.index for t in board.tiles] == list(range(BOARD_SIZE))
    assert board.get_tile(0).tile_type == TileType.START
    assert board.get_tile(10).tile_type == TileType.BANKRUPT
    assert board.tiles_of_type(TileType.BONUS) == [3, 13, 15, 17, 23, 25, 26, 28, 34, 36, 38]


def test_transfer_tiles_carry_parameters():
    board = Board()

    give_right = board.get_tile(6)
    assert (give_right.effect, give_right.amount, give_right.target) == (EffectKind.GIVE_TO, 330, TargetRule.RIGHT)

    take_opposite = board.get_tile(15)
    assert take_opposite.tile_type == TileType.BONUS
    assert (take_opposite.effect, take_opposite.amount, take_opposite.target) == (
        EffectKind.TAKE_FROM,
        150,
        TargetRule.OPPOSITE,
    )

    take_left = board.get_tile(25)
    assert (take_left.amount, take_left.target) == (200, TargetRule.LEFT)

    everyone = board.get_tile(31)
    assert (everyone.effect, everyone.amount) == (EffectKind.GIVE_TO_ALL, 50)

    assert board.get_tile(20).effect == EffectKind.INFO
    assert board.get_tile(3).effect == EffectKind.BONUS_QUESTION
    assert board.get_tile(1).effect == EffectKind.QUESTION


def test_get_tile_wraps_around():
    board = Board()
    assert board.get_tile(41).index == 1


def test_board_rejects_wrong_size():
    with pytest.raises(InvalidBoardError):
        Board.from_titles(STANDARD_TITLES[:-1])


def test_board_rejects_misnumbered_tiles():
    tiles = [tile_from_title(i, t) for i, t in enumerate(STANDARD_TITLES)]
    tiles[5], tiles[6] = tiles[6], tiles[5]
    with pytest.raises(InvalidBoardError):
        Board(tiles)


@pytest.mark.parametrize(
    "title,tile_type,effect,amount",
    [
        ("LOSE ⭐50!", TileType.PENALTY, EffectKind.LOSE, 50),
        ("GIVE ⭐80!", TileType.PENALTY, EffectKind.LOSE, 80),
        ("TAKE ⭐120!", TileType.BONUS, EffectKind.TAKE_FROM, 120),
        ("İflas", TileType.BANKRUPT, EffectKind.BANKRUPT, 0),
        ("Bonus", TileType.BONUS, EffectKind.BONUS_QUESTION, 0),
        ("Who am I?", TileType.QUESTION, EffectKind.QUESTION, 0),
        ("FREE PARKING", TileType.SPECIAL, EffectKind.NONE, 0),
    ],
)
def test_tile_from_title(title, tile_type, effect, amount):
    tile = tile_from_title(7, title)
    assert tile.index == 7
    assert tile.tile_type == tile_type
    assert tile.effect == effect
    assert tile.amount == amount


def test_star_amount_parsing():
    assert parse_star_amount("GIVE ⭐330 TO THE PLAYER ON YOUR RIGHT!") == 330
    assert parse_star_amount("GIVE ⭐ 45 TO EVERYONE") == 45
    assert parse_star_amount("GIVE SOMETHING") == 0


def test_bankruptcy_title_detection():
    assert is_bankrupt_title("bankrupt!")
    assert is_bankrupt_title("İFLAS")
    assert is_bankrupt_title("iflas")
    assert not is_bankrupt_title("BONUS")

    mislabeled = BoardTile(4, "BANKRUPT!", TileType.QUESTION, EffectKind.QUESTION)
    assert mislabeled.title_denotes_bankruptcy


@pytest.mark.parametrize(
    "rule,mover,count,expected",
    [
        (TargetRule.OPPOSITE, 0, 4, 2),
        (TargetRule.OPPOSITE, 3, 4, 1),
        (TargetRule.OPPOSITE, 0, 2, 1),
        (TargetRule.OPPOSITE, 0, 3, 1),
        (TargetRule.RIGHT, 3, 4, 0),
        (TargetRule.LEFT, 0, 4, 3),
        (TargetRule.LEFT, 1, 2, 0),
    ],
)
def test_target_resolution(rule, mover, count, expected):
    assert rule.resolve(mover, count) == expected
