import io
import random
import socket

import pytest

from hexthello.board import Position, initial_position
from hexthello.client import DEFAULT_NAME, Client, Strategy, main
from hexthello.constants import Move, Tile, null_move
from hexthello.protocol import Connection, Message
from hexthello.search import best_move, best_move_ab


@pytest.fixture
def link():
    a, b = socket.socketpair()
    client_side, peer = Connection(a), Connection(b)
    yield client_side, peer, b
    client_side.close()
    peer.close()


def _client(connection, **kwargs):
    kwargs.setdefault("out", io.StringIO())
    return Client(connection, **kwargs)


def _white_only_position() -> Position:
    position = initial_position()
    board = [[Tile.WHITE if cell == Tile.BLACK else cell for cell in row] for row in position.board]
    return Position(board, {Tile.WHITE: 7, Tile.BLACK: 0}, Tile.BLACK)


def test_request_name_sends_default_name(link):
    conn, _, raw = link
    client = _client(conn)
    assert client.handle(Message.REQUEST_NAME) is True
    assert raw.recv(64) == b"\x08chillGuy"
    assert DEFAULT_NAME == "chillGuy"


def test_request_name_sends_custom_name(link):
    conn, peer, _ = link
    client = _client(conn, name="alpha")
    client.handle(Message.REQUEST_NAME)
    assert peer.recv_name() == "alpha"


def test_color_messages_set_color(link):
    conn, _, _ = link
    client = _client(conn)
    client.handle(Message.COLOR_W)
    assert client.color == Tile.WHITE
    client.handle(Message.COLOR_B)
    assert client.color == Tile.BLACK


def test_new_position_replaces_position(link):
    conn, peer, _ = link
    position = initial_position()
    position.play(position.legal_moves(Tile.BLACK)[0])
    client = _client(conn)
    peer.send_position(position)
    client.handle(Message.NEW_POSITION)
    assert client.position == position


def test_opponent_move_is_played(link):
    conn, peer, _ = link
    client = _client(conn)
    client.handle(Message.COLOR_W)
    move = initial_position().legal_moves(Tile.BLACK)[0]
    peer.send_move(move)
    client.handle(Message.PREPARE_TO_RECEIVE_MOVE)
    expected = initial_position()
    expected.play(move)
    assert client.position == expected
    assert client.position.turn == Tile.WHITE


def test_opponent_null_move_passes_turn(link):
    conn, peer, _ = link
    client = _client(conn)
    client.handle(Message.COLOR_W)
    peer.send_move(null_move(Tile.BLACK))
    client.handle(Message.PREPARE_TO_RECEIVE_MOVE)
    assert client.position.turn == Tile.WHITE
    assert client.position.board == initial_position().board


def test_request_move_sends_minimax_choice(link):
    conn, peer, _ = link
    client = _client(conn, strategy=Strategy.MINIMAX, depth=2)
    client.handle(Message.COLOR_B)
    client.handle(Message.REQUEST_MOVE)
    expected = best_move(initial_position(), Tile.BLACK, 2)
    assert peer.recv_move() == (expected.row, expected.col)
    assert client.position.board[expected.row][expected.col] == Tile.BLACK
    assert client.position.turn == Tile.WHITE


def test_alpha_beta_matches_its_search(link):
    conn, _, _ = link
    client = _client(conn, strategy=Strategy.ALPHA_BETA, depth=2)
    client.color = Tile.BLACK
    assert client.choose_move() == best_move_ab(initial_position(), Tile.BLACK, 2)


def test_random_choice_is_legal(link):
    conn, _, _ = link
    client = _client(conn, strategy=Strategy.RANDOM, rng=random.Random(7))
    client.color = Tile.BLACK
    move = client.choose_move()
    assert move.color == Tile.BLACK
    assert initial_position().is_legal(move)


def test_choose_null_move_when_stuck(link):
    conn, _, _ = link
    client = _client(conn, strategy=Strategy.RANDOM)
    client.color = Tile.BLACK
    client.position = _white_only_position()
    move = client.choose_move()
    assert move.is_null()
    assert move == null_move(Tile.BLACK)


def test_choose_move_without_color_raises(link):
    conn, _, _ = link
    with pytest.raises(RuntimeError):
        _client(conn).choose_move()


def test_unknown_message_is_ignored(link):
    conn, _, _ = link
    client = _client(conn)
    assert client.handle(99) is True
    assert client.position == initial_position()


def test_quit_closes_connection(link):
    conn, _, _ = link
    client = _client(conn)
    assert client.handle(Message.QUIT) is False
    assert conn.fileno() == -1


def test_run_follows_script(link):
    conn, peer, _ = link
    client = _client(conn, name="beta", strategy=Strategy.RANDOM, rng=random.Random(3))
    peer.send_message(Message.COLOR_B)
    peer.send_message(Message.REQUEST_NAME)
    peer.send_message(Message.NEW_POSITION)
    peer.send_position(initial_position())
    peer.send_message(Message.REQUEST_MOVE)
    peer.send_message(Message.QUIT)
    client.run()
    assert peer.recv_name() == "beta"
    row, col = peer.recv_move()
    assert initial_position().is_legal(Move(row, col, Tile.BLACK))
    assert client.color == Tile.BLACK
    assert conn.fileno() == -1


def test_main_help(capsys):
    assert main(["-h"]) == 0
    assert capsys.readouterr().out == "[-i ip] [-p port]\n"


def test_main_unknown_option(capsys):
    assert main(["-x"]) == 1
    assert capsys.readouterr().out == "Unknown option -x\n"


def test_main_missing_argument(capsys):
    assert main(["-p"]) == 1
    assert capsys.readouterr().out == "Option -p requires an argument.\n"