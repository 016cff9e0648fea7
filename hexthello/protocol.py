"""Wire protocol between the game server and its players."""

from __future__ import annotations

import socket
import struct
import time
from enum import IntEnum

from hexthello.board import Position
from hexthello.constants import ARRAY_BOARD_SIZE, MAX_NAME_LENGTH, Move, Tile

MAX_PENDING = 10

_BOARD_CELLS = ARRAY_BOARD_SIZE * ARRAY_BOARD_SIZE
_POSITION_SIZE = _BOARD_CELLS + 2 + 1
_MOVE_FORMAT = struct.Struct("bb")
_NAME_LIMIT = 127  # the length travels as a signed byte


class Message(IntEnum):
    """One-byte message codes exchanged between server and players."""

    NEW_POSITION = 101
    COLOR_W = 102
    COLOR_B = 103
    REQUEST_MOVE = 104
    PREPARE_TO_RECEIVE_MOVE = 105
    REQUEST_NAME = 106
    QUIT = 107


class ProtocolError(ConnectionError):
    """Raised when the peer sends malformed data or the connection fails."""


def encode_move(move: Move) -> bytes:
    """Encode a move as its two signed coordinate bytes."""
    try:
        return _MOVE_FORMAT.pack(move.row, move.col)
    except struct.error:
        raise ValueError(f"move coordinates out of range: ({move.row}, {move.col})") from None


def decode_move(data: bytes) -> tuple[int, int]:
    """Decode two coordinate bytes into (row, col); the color is not on the wire."""
    if len(data) != _MOVE_FORMAT.size:
        raise ProtocolError(f"a move is {_MOVE_FORMAT.size} bytes, got {len(data)}")
    return _MOVE_FORMAT.unpack(data)


def encode_position(position: Position) -> bytes:
    """Encode the board row by row, then white score, black score and turn."""
    if len(position.board) != ARRAY_BOARD_SIZE or any(
        len(row) != ARRAY_BOARD_SIZE for row in position.board
    ):
        raise ValueError("board has the wrong dimensions")
    cells = bytes(int(value) for row in position.board for value in row)
    try:
        tail = struct.pack(
            "BBB",
            position.score[Tile.WHITE],
            position.score[Tile.BLACK],
            int(position.turn),
        )
    except struct.error:
        raise ValueError("score or turn does not fit in a byte") from None
    return cells + tail


def decode_position(data: bytes) -> Position:
    """Decode a position produced by encode_position."""
    if len(data) != _POSITION_SIZE:
        raise ProtocolError(f"a position is {_POSITION_SIZE} bytes, got {len(data)}")
    try:
        board = [
            [Tile(value) for value in data[start:start + ARRAY_BOARD_SIZE]]
            for start in range(0, _BOARD_CELLS, ARRAY_BOARD_SIZE)
        ]
        turn = Tile(data[_BOARD_CELLS + 2])
    except ValueError as exc:
        raise ProtocolError(f"invalid position data: {exc}") from None
    score = {Tile.WHITE: data[_BOARD_CELLS], Tile.BLACK: data[_BOARD_CELLS + 1]}
    return Position(board, score, turn)


def encode_name(name: str) -> bytes:
    """Encode a name as a length byte followed by its bytes."""
    raw = name.encode("utf-8")
    if len(raw) > _NAME_LIMIT:
        raise ValueError(f"name too long: {len(raw)} bytes")
    return bytes([len(raw)]) + raw


class Connection:
    """A player or server endpoint speaking the game protocol over a socket."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _send(self, data: bytes) -> None:
        try:
            self._sock.sendall(data)
        except OSError as exc:
            raise ProtocolError(f"network problem: {exc}") from exc

    def _recv_exact(self, size: int) -> bytes:
        buffer = bytearray()
        while len(buffer) < size:
            try:
                chunk = self._sock.recv(size - len(buffer))
            except OSError as exc:
                raise ProtocolError(f"network problem: {exc}") from exc
            if not chunk:
                raise ProtocolError("connection closed by peer")
            buffer.extend(chunk)
        return bytes(buffer)

    def send_message(self, message: int) -> None:
        """Send a one-byte message code."""
        self._send(bytes([int(message) & 0xFF]))

    def recv_message(self) -> Message | int:
        """Receive a message code; unknown codes are returned as plain ints."""
        code = self._recv_exact(1)[0]
        try:
            return Message(code)
        except ValueError:
            return code

    def send_move(self, move: Move) -> None:
        """Send the coordinates of a move."""
        self._send(encode_move(move))

    def recv_move(self) -> tuple[int, int]:
        """Receive the coordinates of a move as (row, col)."""
        return decode_move(self._recv_exact(_MOVE_FORMAT.size))

    def send_name(self, name: str) -> None:
        """Send a player's name."""
        self._send(encode_name(name))

    def recv_name(self) -> str:
        """Receive a name, truncated to the maximum name length."""
        size = self._recv_exact(1)[0]
        raw = self._recv_exact(size) if size else b""
        return raw[:MAX_NAME_LENGTH].decode("utf-8", errors="replace")

    def send_position(self, position: Position) -> None:
        """Send a whole position."""
        self._send(encode_position(position))

    def recv_position(self) -> Position:
        """Receive a whole position."""
        return decode_position(self._recv_exact(_POSITION_SIZE))

    def fileno(self) -> int:
        """File descriptor of the underlying socket, for use with select."""
        return self._sock.fileno()

    def close(self) -> None:
        """Close the underlying socket."""
        self._sock.close()


def listen(port: str | int) -> socket.socket:
    """Open a listening TCP socket on all interfaces."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind(("", int(port)))
        sock.listen(MAX_PENDING)
    except OSError:
        sock.close()
        raise
    print(f"Listening to port: {sock.getsockname()[1]}...")
    return sock


def accept(server_socket: socket.socket) -> Connection:
    """Accept one incoming connection."""
    try:
        sock, _ = server_socket.accept()
    except OSError as exc:
        raise ProtocolError(f"accept failed: {exc}") from exc
    return Connection(sock)


def connect(port: str | int, ip: str = "127.0.0.1", retry_delay: float = 1.0) -> Connection:
    """Connect to a server, retrying until it accepts."""
    address = (ip, int(port))
    while True:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.connect(address)
        except OSError:
            sock.close()
            print("ERROR: Connect function Failed.. Retrying")
            time.sleep(retry_delay)
            continue
        return Connection(sock)