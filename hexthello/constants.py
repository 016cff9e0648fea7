"""Board dimensions, tile values and the move record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

HEX_BOARD_RADIUS = 7
ARRAY_BOARD_SIZE = HEX_BOARD_RADIUS * 2 + 1

NULL_MOVE = -50
"""Row value marking a null move, the only legal move when none is available."""

MAX_NAME_LENGTH = 8
DEFAULT_PORT = "6002"


class Tile(IntEnum):
    """State of one cell of the board array; WHITE and BLACK double as colors."""

    WHITE = 0
    BLACK = 1
    EMPTY = 2
    ILLEGAL = 3
    OUT_OF_BOUND = 4


def other_side(color: int) -> Tile:
    """Return the opposing player color."""
    if color not in (Tile.WHITE, Tile.BLACK):
        raise ValueError(f"not a player color: {color!r}")
    return Tile(1 - int(color))


@dataclass(frozen=True)
class Move:
    """A move: the array coordinates of the chosen tile and the mover's color."""

    row: int
    col: int
    color: Tile

    def is_null(self) -> bool:
        """True when this is the null move."""
        return self.row == NULL_MOVE


def null_move(color: int) -> Move:
    """Return the null move for the given color."""
    return Move(NULL_MOVE, NULL_MOVE, Tile(color))