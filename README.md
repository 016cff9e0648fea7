# hexthello

Othello (Reversi) played on a hexagonal board of radius 7. Pieces are placed
on empty cells and flip every straight line of opponent pieces that ends in
one of your own, along the six hexagonal directions. A player with no legal
placement must pass; the game ends when neither side can move, and the side
with more pieces wins. Black moves first.

The package contains:

- a rules engine (`hexthello.board.Position`) with move legality, move
  playing and scoring;
- a small binary network protocol (`hexthello.protocol`) spoken between
  server and players over TCP;
- game-tree search for computer players (`hexthello.search`): plain minimax,
  minimax with alpha-beta pruning, and a random player;
- a command-line player client (`hexthello-client`), a command-line match
  server (`hexthello-server`), and a desktop game server (`hexthello-gui`)
  where humans, the built-in random player and connected clients can be set
  against each other.

No third-party packages are needed. The desktop server uses the standard
library's Tk bindings (`tkinter`), which some Python installations ship
separately.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Running a match

Start the match server, then start two clients. The first client to connect
plays White, the second plays Black.

```
hexthello-server
hexthello-client
hexthello-client
```

Server options:

| Option    | Meaning                              | Default |
|-----------|--------------------------------------|---------|
| `-p PORT` | TCP port to listen on                | 6002    |
| `-g N`    | number of games to play              | 1       |
| `-s`      | swap colours after each game         | off     |
| `-h`      | print usage and exit                 |         |

Client options:

| Option    | Meaning                  | Default   |
|-----------|--------------------------|-----------|
| `-i IP`   | address of the server    | 127.0.0.1 |
| `-p PORT` | port of the server       | 6002      |
| `-h`      | print usage and exit     |           |

On start-up the client asks which kind of player to be: `0` for random,
`1` for minimax, `2` for minimax with alpha-beta pruning (any other number
means random; input that is not a number keeps minimax). The search looks
three plies ahead and scores a position as its own piece count minus the
opponent's. If the server is not up yet, the client keeps retrying once a
second. The client announces itself with the name `chillGuy`.

A player that sends an illegal move — including a pass while a legal move
exists — loses that game on the spot, and the server prints the offending
move. After every game the server prints the winner's name and the score;
once all games are played it tells both clients to quit.

## The desktop server

```
hexthello-gui
```

takes `-p PORT` (default 6002) and `-h`. It opens a window with the board,
Play / Stop / Reset / Quit buttons, a swap button, the current score, and a
selector for each colour. Every selector offers "Human", "Random" and the
name of every client that has connected to the window's port. Humans play by
clicking a highlighted cell; passes are made automatically when no move is
available. The last move is outlined on the board. While the game is
stopped, players can be changed, swapped, and a seated client can be
disconnected.

## Using the engine from Python

```python
from hexthello.board import describe_result, initial_position
from hexthello.search import best_move_ab

position = initial_position()
while not position.is_over():
    # best_move_ab returns the null move (a pass) when no move is legal
    position.play(best_move_ab(position, position.turn, 3))

print(position.format())
print(describe_result(position, "white", "black"))
```

`Position.legal_moves(color)` lists every legal placement for a colour,
`Position.is_legal(move)` checks a single move, and `Position.copy()` gives an
independent copy for look-ahead. `hexthello.search.random_move` and
`best_move` pick moves the other two ways.

## What it does not do

The match server seats exactly two clients and has no move time limits;
results are only printed, never stored. The desktop server draws plain
coloured hexagons rather than image themes.