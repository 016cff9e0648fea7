"""Game session behind the graphical server: seating, turn flow and highlights."""

from __future__ import annotations

import contextlib
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterator, TextIO

from hexthello.board import (
    Position,
    describe_result,
    illegal_move_message,
    initial_position,
)
from hexthello.constants import Move, Tile, null_move, other_side
from hexthello.protocol import Connection, Message, ProtocolError
from hexthello.search import random_move

MAX_PLAYERS = 50 + 2
HUMAN = 0
RANDOM = 1
FIRST_EXTERNAL = 2


class CellState(IntEnum):
    """What a board cell shows on screen."""

    EMPTY = 0
    WHITE = 1
    BLACK = 2
    ILLEGAL = 3
    WHITE_LAST_MOVE = 4
    BLACK_LAST_MOVE = 5
    POSSIBLE_MOVE = 6


_BASE_STATES = {
    Tile.WHITE: CellState.WHITE,
    Tile.BLACK: CellState.BLACK,
    Tile.EMPTY: CellState.EMPTY,
    Tile.ILLEGAL: CellState.ILLEGAL,
}


@dataclass
class _Entry:
    name: str
    connection: Connection | None = None
    color: Tile | None = None


class Roster:
    """Selectable players: Human, Random, then the connected agents in order."""

    def __init__(self, limit: int = MAX_PLAYERS) -> None:
        self.limit = limit
        self._entries = [_Entry("Human"), _Entry("Random")]

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> _Entry:
        return self._entries[index]

    def __iter__(self) -> Iterator[_Entry]:
        return iter(self._entries)

    def add(self, name: str, connection: Connection) -> int:
        """Register a connected agent and return its index."""
        if len(self._entries) >= self.limit:
            raise RuntimeError("player limit reached, connection rejected")
        self._entries.append(_Entry(name, connection))
        return len(self._entries) - 1

    def remove(self, index: int) -> None:
        """Drop a connected agent; later agents move up one place."""
        if not 0 <= index < len(self._entries):
            raise IndexError(f"no player at index {index}")
        if index < FIRST_EXTERNAL:
            raise ValueError("the built-in players cannot be removed")
        del self._entries[index]

    def names(self) -> list[str]:
        """Names of all selectable players, in index order."""
        return [entry.name for entry in self._entries]


class Session:
    """State and rules of the interactive server, independent of any toolkit."""

    def __init__(
        self,
        roster: Roster | None = None,
        rng: random.Random | None = None,
        out: TextIO | None = None,
        on_update: Callable[[], None] | None = None,
        on_message: Callable[[str], None] | None = None,
    ) -> None:
        self.roster = Roster() if roster is None else roster
        self.rng = rng or random.Random()
        self.out = out
        self.on_update = on_update
        self.on_message = on_message
        self.position: Position = initial_position()
        self.last_move: Move | None = None
        self.seats: dict[Tile, int] = {Tile.WHITE: HUMAN, Tile.BLACK: HUMAN}
        self.stopped = True
        self.can_play = True
        self.messages: list[str] = []
        self._possible: set[tuple[int, int]] = set()
        self._show_last = True

    # -- display -------------------------------------------------------

    def cell_states(self) -> list[list[CellState | None]]:
        """Screen state of every cell; None for cells outside the hexagon."""
        grid: list[list[CellState | None]] = []
        for r, row in enumerate(self.position.board):
            line: list[CellState | None] = []
            for c, value in enumerate(row):
                tile = Tile(value)
                if tile == Tile.OUT_OF_BOUND:
                    line.append(None)
                elif tile == Tile.EMPTY and (r, c) in self._possible:
                    line.append(CellState.POSSIBLE_MOVE)
                else:
                    line.append(_BASE_STATES[tile])
            grid.append(line)

        last = self.last_move
        if self._show_last and last is not None and not last.is_null():
            if 0 <= last.row < len(grid) and 0 <= last.col < len(grid[last.row]):
                if grid[last.row][last.col] is not None:
                    grid[last.row][last.col] = (
                        CellState.WHITE_LAST_MOVE
                        if last.color == Tile.WHITE
                        else CellState.BLACK_LAST_MOVE
                    )
        return grid

    def _changed(self) -> None:
        if self.on_update is not None:
            self.on_update()

    def _print(self, text: str) -> None:
        print(text, end="", file=self.out)

    def _announce(self, text: str) -> None:
        self.stop()
        self.messages.append(text)
        if self.on_message is not None:
            self.on_message(text)
        if self.position.is_over():
            self.can_play = False
        self._changed()

    # -- seating -------------------------------------------------------

    def _require_stopped(self) -> None:
        if not self.stopped:
            raise RuntimeError("stop the game before changing players")

    def select_white(self, index: int) -> None:
        """Seat the player at `index` as white."""
        self._require_stopped()
        self._select(Tile.WHITE, index)

    def select_black(self, index: int) -> None:
        """Seat the player at `index` as black."""
        self._require_stopped()
        self._select(Tile.BLACK, index)

    def _select(self, color: Tile, index: int) -> None:
        if not 0 <= index < len(self.roster):
            raise IndexError(f"no player at index {index}")
        if index >= FIRST_EXTERNAL and index == self.seats[other_side(color)]:
            raise ValueError("an agent cannot play both colors")
        self.seats[color] = index
        if index >= FIRST_EXTERNAL:
            entry = self.roster[index]
            entry.color = color
            conn = entry.connection
            code = Message.COLOR_W if color == Tile.WHITE else Message.COLOR_B
            try:
                conn.send_message(Message.NEW_POSITION)
                conn.send_position(self.position)
                conn.send_message(code)
            except ProtocolError:
                self._drop(conn)
                return
        self._changed()

    def swap(self) -> None:
        """Exchange the players seated at white and black."""
        self._require_stopped()
        new_white = self.roster[self.seats[Tile.BLACK]]
        new_black = self.roster[self.seats[Tile.WHITE]]
        self._select(Tile.WHITE, HUMAN)
        self._select(Tile.BLACK, HUMAN)
        self._select(Tile.WHITE, self._index_of(new_white))
        self._select(Tile.BLACK, self._index_of(new_black))

    def _index_of(self, entry: _Entry) -> int:
        return next((i for i, e in enumerate(self.roster) if e is entry), HUMAN)

    def disconnect(self, color: int) -> None:
        """Dismiss the agent seated at `color` and seat the human there."""
        color = Tile(color)
        index = self.seats[color]
        if index < FIRST_EXTERNAL:
            raise ValueError("only a connected agent can be disconnected")
        entry = self.roster[index]
        self.seats[color] = HUMAN
        self._quietly_quit(entry.connection)
        self.roster.remove(index)
        for seat_color, seat in self.seats.items():
            if seat > index:
                self.seats[seat_color] = seat - 1
        self._changed()

    def _drop(self, connection: Connection | None) -> None:
        for color, index in list(self.seats.items()):
            if index >= FIRST_EXTERNAL and self.roster[index].connection is connection:
                self.disconnect(color)
                return

    @staticmethod
    def _quietly_quit(connection: Connection | None) -> None:
        if connection is None:
            return
        with contextlib.suppress(ProtocolError):
            connection.send_message(Message.QUIT)
        with contextlib.suppress(OSError):
            connection.close()

    def close_all(self) -> None:
        """Tell every connected agent to quit and forget them."""
        for entry in list(self.roster)[FIRST_EXTERNAL:]:
            self._quietly_quit(entry.connection)
        for index in reversed(range(FIRST_EXTERNAL, len(self.roster))):
            self.roster.remove(index)
        for color, index in self.seats.items():
            if index >= FIRST_EXTERNAL:
                self.seats[color] = HUMAN
        self._changed()

    # -- game flow -----------------------------------------------------

    def play(self) -> None:
        """Start or resume the game with the player whose turn it is."""
        if not self.can_play:
            raise RuntimeError("the game is over; reset it first")
        self.stopped = False
        index = self.seats[self.position.turn]
        if index >= FIRST_EXTERNAL:
            conn = self.roster[index].connection
            try:
                conn.send_message(Message.REQUEST_MOVE)
            except ProtocolError:
                self._drop(conn)
            self._changed()
        else:
            self.advance()

    def stop(self) -> None:
        """Pause the game."""
        self.stopped = True
        self._changed()

    def reset(self) -> None:
        """Start a fresh position and send it to seated agents."""
        self.can_play = True
        self.last_move = None
        self.position = initial_position()
        self._possible.clear()
        self._show_last = True
        self._changed()
        for color in (Tile.WHITE, Tile.BLACK):
            index = self.seats[color]
            if index < FIRST_EXTERNAL:
                continue
            conn = self.roster[index].connection
            try:
                conn.send_message(Message.NEW_POSITION)
                conn.send_position(self.position)
            except ProtocolError:
                self._drop(conn)
                return

    def _apply(self, move: Move) -> None:
        self.position.play(move)
        self.last_move = move
        self._print(self.position.format())
        self._possible.clear()
        self._show_last = True
        self._changed()

    def play_random(self) -> None:
        """Play a random move for the side to move, then continue the game."""
        turn = self.position.turn
        self._apply(random_move(self.position, turn, self.rng))
        self.advance()

    def advance(self) -> None:
        """Carry the game on after a move until someone else must act."""
        while True:
            if self.position.is_over():
                self._finish()
                return
            turn = self.position.turn
            index = self.seats[turn]
            if index == HUMAN:
                if not self.position.can_move(turn):
                    self._apply(null_move(turn))
                    continue
                self._possible = {
                    (move.row, move.col) for move in self.position.legal_moves(turn)
                }
                self._changed()
                return
            if index == RANDOM:
                if self.stopped:
                    return
                self._apply(random_move(self.position, turn, self.rng))
                continue

            conn = self.roster[index].connection
            move = self.last_move or null_move(other_side(turn))
            try:
                conn.send_message(Message.PREPARE_TO_RECEIVE_MOVE)
                conn.send_move(move)
                if not self.stopped:
                    conn.send_message(Message.REQUEST_MOVE)
            except ProtocolError:
                self._drop(conn)
            return

    def _finish(self) -> None:
        self._print("Game ended!\n")
        result = describe_result(
            self.position,
            self.roster[self.seats[Tile.WHITE]].name,
            self.roster[self.seats[Tile.BLACK]].name,
        )
        self._announce(result)

    def click(self, row: int, col: int) -> bool:
        """Handle a click on a cell; True if it played a human move."""
        if self.stopped:
            return False
        turn = self.position.turn
        if self.seats[turn] != HUMAN:
            return False
        self._show_last = False
        move = Move(row, col, turn)
        if not self.position.is_legal(move):
            self._changed()
            return False
        self._apply(move)
        self.advance()
        return True

    def on_socket_ready(self, connection: Connection) -> None:
        """Read and referee a move that an agent has sent."""
        turn = self.position.turn
        index = self.seats[turn]
        playing = self.roster[index] if index >= FIRST_EXTERNAL else None

        try:
            row, col = connection.recv_move()
        except ProtocolError:
            self._drop(connection)
            return
        if playing is None or playing.connection is not connection:
            return

        move = Move(row, col, turn)
        if not self.position.can_move(turn):
            legal = move.is_null()
        else:
            legal = self.position.is_legal(move)
        if not legal:
            self._announce(illegal_move_message(playing.name, move))
            return

        self._apply(move)
        self.advance()