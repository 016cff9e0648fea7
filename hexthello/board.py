"""Game position, move legality and move execution on the hexagonal board."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from hexthello.constants import (
    ARRAY_BOARD_SIZE,
    HEX_BOARD_RADIUS,
    Move,
    Tile,
    other_side,
)

# Six hexagonal neighbours: every (dr, dc) in {-1, 0, 1}^2 with dr != dc.
_DIRECTIONS = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if dr != dc
)

_SYMBOLS = {
    Tile.WHITE: "W ",
    Tile.BLACK: "B ",
    Tile.EMPTY: ". ",
    Tile.ILLEGAL: "X ",
    Tile.OUT_OF_BOUND: "",
}


def _in_bounds(row: int, col: int) -> bool:
    return 0 <= row < ARRAY_BOARD_SIZE and 0 <= col < ARRAY_BOARD_SIZE


@dataclass
class Position:
    """Board contents, per-color score and the color to move."""

    board: list[list[Tile]]
    score: dict[Tile, int] = field(
        default_factory=lambda: {Tile.WHITE: 0, Tile.BLACK: 0}
    )
    turn: Tile = Tile.BLACK

    def copy(self) -> Position:
        """Return an independent copy."""
        return Position([list(row) for row in self.board], dict(self.score), self.turn)

    def format(self) -> str:
        """Render the board followed by the turn and score lines."""
        if self.turn == Tile.WHITE:
            turn = "WHITE"
        elif self.turn == Tile.BLACK:
            turn = "BLACK"
        else:
            turn = "-"
        return (
            format_board(self.board)
            + f"Turn: {turn}\n"
            + f"Score is  W: {self.score[Tile.WHITE]}  B: {self.score[Tile.BLACK]}\n"
        )

    def _flips(self, move: Move, dr: int, dc: int) -> list[tuple[int, int]]:
        """Cells captured by `move` along one direction, empty if none."""
        row, col = move.row, move.col
        last = ARRAY_BOARD_SIZE - 2
        if (dr == -1 and row < 2) or (dr == 1 and row >= last):
            return []
        if (dc == -1 and col < 2) or (dc == 1 and col >= last):
            return []

        opponent = other_side(move.color)
        row, col = row + dr, col + dc
        captured = []
        while _in_bounds(row, col) and self.board[row][col] == opponent:
            captured.append((row, col))
            row, col = row + dr, col + dc

        if not captured or not _in_bounds(row, col):
            return []
        if self.board[row][col] != move.color:
            return []
        return captured

    def _captures(self, move: Move) -> Iterable[list[tuple[int, int]]]:
        return (self._flips(move, dr, dc) for dr, dc in _DIRECTIONS)

    def is_legal(self, move: Move) -> bool:
        """True if `move` places a piece on an empty cell and captures something."""
        if not _in_bounds(move.row, move.col):
            return False
        if self.board[move.row][move.col] != Tile.EMPTY:
            return False
        return any(self._captures(move))

    def is_legal_at(self, row: int, col: int, color: int) -> bool:
        """Same as is_legal, given the coordinates and color directly."""
        return self.is_legal(Move(row, col, Tile(color)))

    def play(self, move: Move) -> bool:
        """Play `move` and report whether it captured anything.

        A null move only passes the turn. A move that captures nothing
        leaves the position untouched.
        """
        if move.is_null():
            self.turn = other_side(self.turn)
            return True
        if not _in_bounds(move.row, move.col):
            raise ValueError(f"move outside the board: ({move.row}, {move.col})")

        color = Tile(move.color)
        opponent = other_side(color)
        captured = [cell for run in self._captures(move) for cell in run]
        if not captured:
            return False

        for row, col in captured:
            self.board[row][col] = color
        self.score[color] += len(captured)
        self.score[opponent] -= len(captured)

        self.board[move.row][move.col] = color
        self.score[color] += 1
        self.turn = other_side(self.turn)
        return True

    def legal_moves(self, color: int) -> list[Move]:
        """All legal moves for `color`, in row-major order."""
        color = Tile(color)
        return [
            move
            for row in range(ARRAY_BOARD_SIZE)
            for col in range(ARRAY_BOARD_SIZE)
            if self.is_legal(move := Move(row, col, color))
        ]

    def can_move(self, color: int) -> bool:
        """True if `color` has at least one legal move."""
        color = Tile(color)
        return any(
            self.is_legal(Move(row, col, color))
            for row in range(ARRAY_BOARD_SIZE)
            for col in range(ARRAY_BOARD_SIZE)
        )

    def is_over(self) -> bool:
        """True when neither color can move."""
        return not self.can_move(Tile.WHITE) and not self.can_move(Tile.BLACK)


def initial_position() -> Position:
    """Return the starting position: hexagonal board, centre pieces, black to move."""
    r = HEX_BOARD_RADIUS
    whites = {(r, r), (r - 1, r), (r, r + 1), (r + 1, r - 1)}
    blacks = {(r, r - 1), (r - 1, r + 1), (r + 1, r)}

    board = []
    for i in range(ARRAY_BOARD_SIZE):
        limit = r - i
        row = []
        for j in range(ARRAY_BOARD_SIZE):
            if limit > j or (limit < 0 and j >= limit + ARRAY_BOARD_SIZE):
                row.append(Tile.OUT_OF_BOUND)
            elif (i, j) in whites:
                row.append(Tile.WHITE)
            elif (i, j) in blacks:
                row.append(Tile.BLACK)
            else:
                row.append(Tile.EMPTY)
        board.append(row)

    return Position(board, {Tile.WHITE: 4, Tile.BLACK: 3}, Tile.BLACK)


def format_board(board: Sequence[Sequence[int]]) -> str:
    """Render the board as indented text rows, one hexagon row per line."""
    lines = []
    for index, row in enumerate(board):
        indent = " " * (1 + abs(HEX_BOARD_RADIUS - index))
        cells = []
        for value in row:
            try:
                cells.append(_SYMBOLS[Tile(value)])
            except ValueError:
                raise ValueError(f"unknown tile value in board: {value!r}") from None
        lines.append(indent + "".join(cells) + "\n")
    return "".join(lines)


def describe_result(position: Position, white_name: str, black_name: str) -> str:
    """Announce the winner (or a draw) with the final score."""
    white = position.score[Tile.WHITE]
    black = position.score[Tile.BLACK]
    if white > black:
        return f"WHITE WON! ({white_name}) Score W:{white} B:{black}"
    if white < black:
        return f"BLACK WON! ({black_name}) Score W:{white} B:{black}"
    return f"DRAW! Score W:{white} B:{black}"


def illegal_move_message(name: str, move: Move) -> str:
    """Message announcing a technical loss for an illegal move."""
    head = f"Player: {name} tried an illegal move and lost the game!\nIllegal move:"
    if move.is_null():
        return head + "NULL MOVE"
    return head + f"( {move.row}, {move.col} )"