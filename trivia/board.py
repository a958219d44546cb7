from typing import List, Optional, Sequence

from trivia.exceptions import InvalidBoardError
from trivia.tiles import BoardTile, TileType, tile_from_title

BOARD_SIZE = 40

STANDARD_TITLES = (
    # Bottom row (0-9)
    "START",
    "WHO AM I?",
    "FIRSTS IN TURKISH LITERATURE",
    "BONUS",
    "LITERARY MOVEMENTS",
    "LITERARY DEVICES",
    "GIVE ⭐330 TO THE PLAYER ON YOUR RIGHT!",
    "WORK & CHARACTER",
    "FIRSTS IN TURKISH LITERATURE",
    "LITERARY DEVICES",
    # Left side (10-19)
    "BANKRUPT!",
    "LITERARY MOVEMENTS",
    "WHO AM I?",
    "BONUS",
    "WORK & CHARACTER",
    "TAKE ⭐150 FROM THE PLAYER OPPOSITE!",
    "LITERARY DEVICES",
    "BONUS",
    "FIRSTS IN TURKISH LITERATURE",
    "WHO AM I?",
    # Top row (20-29)
    "ASK A BONUS QUESTION TO A PLAYER OF YOUR CHOICE.",
    "LITERARY MOVEMENTS",
    "FIRSTS IN TURKISH LITERATURE",
    "BONUS",
    "LITERARY DEVICES",
    "TAKE ⭐200 FROM THE PLAYER ON YOUR LEFT!",
    "BONUS",
    "FIRSTS IN TURKISH LITERATURE",
    "BONUS",
    "GIVE ⭐150 TO THE PLAYER OPPOSITE!",
    # Right side (30-39)
    "WORK & CHARACTER",
    "GIVE ⭐50 TO EVERYONE!",
    "WHO AM I?",
    "WORK & CHARACTER",
    "BONUS",
    "LITERARY MOVEMENTS",
    "BONUS",
    "GIVE ⭐100 TO THE PLAYER OPPOSITE!",
    "BONUS",
    "FIRSTS IN TURKISH LITERATURE",
)


class Board:
    """The trivia game board: a fixed loop of 40 tiles."""

    def __init__(self, tiles: Optional[Sequence[BoardTile]] = None):
        if tiles is None:
            tiles = [tile_from_title(i, title) for i, title in enumerate(STANDARD_TITLES)]
        tiles = list(tiles)
        if len(tiles) != BOARD_SIZE:
            raise InvalidBoardError(f"Board needs {BOARD_SIZE} tiles, got {len(tiles)}")
        for expected, tile in enumerate(tiles):
            if tile.index != expected:
                raise InvalidBoardError(f"Tile at slot {expected} has index {tile.index}")
        self.tiles: List[BoardTile] = tiles

    @classmethod
    def from_titles(cls, titles: Sequence[str]) -> "Board":
        """Build a board by classifying each title."""
        return cls([tile_from_title(i, title) for i, title in enumerate(titles)])

    def get_tile(self, position: int) -> BoardTile:
        """Get the tile at the given position."""
        return self.tiles[position % BOARD_SIZE]

    def tiles_of_type(self, tile_type: TileType) -> List[int]:
        """Get positions of all tiles of a type."""
        return [t.index for t in self.tiles if t.tile_type == tile_type]

