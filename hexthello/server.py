"""Console game server: seats two connected players and referees their games."""

from __future__ import annotations

import getopt
import sys
from dataclasses import dataclass
from typing import TextIO

from hexthello.board import Position, describe_result, illegal_move_message, initial_position
from hexthello.constants import DEFAULT_PORT, Move, Tile
from hexthello.protocol import Connection, Message, accept, listen

_USAGE = "[-p port] [-g number_of_games] [-s (swap color after each game)]"


@dataclass
class Player:
    """A connected player: its connection, color and announced name."""

    connection: Connection
    color: Tile
    name: str = ""


class Match:
    """A series of games between two players; the first to connect plays white."""

    def __init__(
        self,
        first: Connection,
        second: Connection,
        games: int = 1,
        swap: bool = False,
        out: TextIO | None = None,
    ) -> None:
        self.first = Player(first, Tile.WHITE)
        self.second = Player(second, Tile.BLACK)
        self.games = games
        self.swap = swap
        self.out = out
        self.position: Position = initial_position()

    def _print(self, text: str, end: str = "\n") -> None:
        print(text, end=end, file=self.out)

    def _show(self) -> None:
        self._print(self.position.format(), end="")

    def _holding(self, color: Tile) -> Player:
        return self.first if self.first.color == color else self.second

    def play_game(self) -> str:
        """Referee one game and return the line announcing its outcome."""
        self.position = initial_position()
        self._show()
        for player in (self.first, self.second):
            player.connection.send_message(Message.NEW_POSITION)
            player.connection.send_position(self.position)

        while True:
            playing = self._holding(self.position.turn)
            waiting = self.second if playing is self.first else self.first

            playing.connection.send_message(Message.REQUEST_MOVE)
            row, col = playing.connection.recv_move()
            move = Move(row, col, playing.color)

            if not self.position.can_move(playing.color):
                legal = move.is_null()
            else:
                legal = self.position.is_legal(move)
            if not legal:
                outcome = illegal_move_message(playing.name, move)
                self._print(outcome)
                return outcome

            self.position.play(move)
            self._show()

            if self.position.is_over():
                self._print("Game ended!")
                outcome = describe_result(
                    self.position,
                    self._holding(Tile.WHITE).name,
                    self._holding(Tile.BLACK).name,
                )
                self._print(outcome)
                return outcome

            waiting.connection.send_message(Message.PREPARE_TO_RECEIVE_MOVE)
            waiting.connection.send_move(move)

    def swap_colors(self) -> None:
        """Exchange the players' colors and tell both of them."""
        if self.first.color == Tile.BLACK:
            self.first.connection.send_message(Message.COLOR_W)
            self.second.connection.send_message(Message.COLOR_B)
            self.first.color, self.second.color = Tile.WHITE, Tile.BLACK
        else:
            self.first.connection.send_message(Message.COLOR_B)
            self.second.connection.send_message(Message.COLOR_W)
            self.first.color, self.second.color = Tile.BLACK, Tile.WHITE

    def run(self) -> list[str]:
        """Assign colors, collect names, play every game and dismiss the players."""
        self.first.connection.send_message(Message.COLOR_W)
        self.second.connection.send_message(Message.COLOR_B)

        for player in (self.first, self.second):
            player.connection.send_message(Message.REQUEST_NAME)
            player.name = player.connection.recv_name()

        outcomes = []
        for _ in range(self.games):
            outcomes.append(self.play_game())
            if self.swap:
                self.swap_colors()

        for player in (self.first, self.second):
            player.connection.send_message(Message.QUIT)
        return outcomes


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point of the console server."""
    args = sys.argv[1:] if argv is None else list(argv)
    port, games, swap = DEFAULT_PORT, 1, False
    try:
        options, _ = getopt.getopt(args, "p:g:hs")
    except getopt.GetoptError as exc:
        if exc.opt in ("p", "g"):
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
        if option == "-p":
            port = value
        elif option == "-g":
            try:
                games = int(value)
            except ValueError:
                print(f"Invalid number of games: {value}")
                return 1
        elif option == "-s":
            swap = True

    with listen(port) as server_socket:
        with accept(server_socket) as first, accept(server_socket) as second:
            Match(first, second, games, swap).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())