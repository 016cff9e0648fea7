"""Playing agent that connects to a game server and answers its requests."""

from __future__ import annotations

import getopt
import random
import sys
from enum import IntEnum
from typing import TextIO

from hexthello.board import Position, initial_position
from hexthello.constants import DEFAULT_PORT, Move, Tile, null_move, other_side
from hexthello.protocol import Connection, Message, connect
from hexthello.search import DEFAULT_DEPTH, best_move, best_move_ab, random_move

DEFAULT_NAME = "chillGuy"
DEFAULT_IP = "127.0.0.1"
_USAGE = "[-i ip] [-p port]"
_MODE_PROMPT = "Choose player mode: 0 (Random), 1 (Minimax), 2 (Alpha-Beta): "


class Strategy(IntEnum):
    """How the agent picks its moves."""

    RANDOM = 0
    MINIMAX = 1
    ALPHA_BETA = 2


def _parse_strategy(text: str) -> Strategy:
    """Map the typed mode to a strategy; unreadable input keeps minimax."""
    try:
        value = int(text.strip())
    except ValueError:
        return Strategy.MINIMAX
    if value == Strategy.MINIMAX:
        return Strategy.MINIMAX
    if value == Strategy.ALPHA_BETA:
        return Strategy.ALPHA_BETA
    return Strategy.RANDOM


class Client:
    """Game agent driven by the messages a server sends over a connection."""

    def __init__(
        self,
        connection: Connection,
        name: str = DEFAULT_NAME,
        strategy: Strategy = Strategy.MINIMAX,
        depth: int = DEFAULT_DEPTH,
        rng: random.Random | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.connection = connection
        self.name = name
        self.strategy = strategy
        self.depth = depth
        self.rng = rng or random.Random()
        self.out = out
        self.position: Position = initial_position()
        self.color: Tile | None = None

    def _show(self) -> None:
        print(self.position.format(), end="", file=self.out)

    def choose_move(self) -> Move:
        """Pick a move for our color; the null move when none is legal."""
        if self.color is None:
            raise RuntimeError("no color has been assigned yet")
        if not self.position.can_move(self.color):
            return null_move(self.color)
        if self.strategy == Strategy.MINIMAX:
            return best_move(self.position, self.color, self.depth)
        if self.strategy == Strategy.ALPHA_BETA:
            return best_move_ab(self.position, self.color, self.depth)
        return random_move(self.position, self.color, self.rng)

    def handle(self, message: Message | int) -> bool:
        """React to one server message; False once the server says to quit."""
        if message == Message.REQUEST_NAME:
            self.connection.send_name(self.name)
        elif message == Message.NEW_POSITION:
            self.position = self.connection.recv_position()
            self._show()
        elif message == Message.COLOR_W:
            self.color = Tile.WHITE
        elif message == Message.COLOR_B:
            self.color = Tile.BLACK
        elif message == Message.PREPARE_TO_RECEIVE_MOVE:
            if self.color is None:
                raise RuntimeError("no color has been assigned yet")
            row, col = self.connection.recv_move()
            self.position.play(Move(row, col, other_side(self.color)))
            self._show()
        elif message == Message.REQUEST_MOVE:
            move = self.choose_move()
            self.connection.send_move(move)
            self.position.play(move)
            self._show()
        elif message == Message.QUIT:
            self.connection.close()
            return False
        return True

    def run(self) -> None:
        """Serve the server's requests until it tells us to quit."""
        while self.handle(self.connection.recv_message()):
            pass


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point of the playing agent."""
    args = sys.argv[1:] if argv is None else list(argv)
    ip, port = DEFAULT_IP, DEFAULT_PORT
    try:
        options, _ = getopt.getopt(args, "i:p:h")
    except getopt.GetoptError as exc:
        if exc.opt in ("i", "p"):
            print(f"Option -{exc.opt} requires an argument.")
        elif exc.opt.isprintable():
            print(f"Unknown option -{exc.opt}")
        else:
            print(f"Unknown option character -{exc.opt}")
        return 1

    for option, value in options:
        if option == "-h":
            print(_USAGE)
            return 0
        if option == "-i":
            ip = value
        elif option == "-p":
            port = value

    try:
        strategy = _parse_strategy(input(_MODE_PROMPT))
    except EOFError:
        strategy = Strategy.MINIMAX

    connection = connect(port, ip)
    Client(connection, strategy=strategy).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())