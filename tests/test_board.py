import pytest

from hexthello.board import (
    Position,
    describe_result,
    format_board,
    illegal_move_message,
    initial_position,
)
from hexthello.constants import (
    ARRAY_BOARD_SIZE,
    HEX_BOARD_RADIUS,
    Move,
    Tile,
    null_move,
)


def _count(position, tile):
    return sum(row.count(tile) for row in position.board)


def test_initial_position_score_and_turn():
    pos = initial_position()
    assert pos.score[Tile.WHITE] == 4
    assert pos.score[Tile.BLACK] == 3
    assert pos.turn is Tile.BLACK


def test_initial_position_piece_counts_match_score():
    pos = initial_position()
    assert _count(pos, Tile.WHITE) == pos.score[Tile.WHITE]
    assert _count(pos, Tile.BLACK) == pos.score[Tile.BLACK]


def test_initial_position_centre_pieces():
    pos = initial_position()
    r = HEX_BOARD_RADIUS
    assert pos.board[r][r] is Tile.WHITE
    assert pos.board[r - 1][r] is Tile.WHITE
    assert pos.board[r][r + 1] is Tile.WHITE
    assert pos.board[r + 1][r - 1] is Tile.WHITE
    assert pos.board[r][r - 1] is Tile.BLACK
    assert pos.board[r - 1][r + 1] is Tile.BLACK
    assert pos.board[r + 1][r] is Tile.BLACK


def test_initial_position_hexagon_shape():
    pos = initial_position()
    playable = ARRAY_BOARD_SIZE**2 - _count(pos, Tile.OUT_OF_BOUND)
    assert playable == 169
    assert pos.board[0][0] is Tile.OUT_OF_BOUND
    assert pos.board[0][HEX_BOARD_RADIUS] is Tile.EMPTY
    assert pos.board[-1][-1] is Tile.OUT_OF_BOUND
    assert pos.board[-1][HEX_BOARD_RADIUS] is Tile.EMPTY


def test_format_board_first_row():
    text = format_board(initial_position().board)
    lines = text.split("\n")
    assert len(lines) == ARRAY_BOARD_SIZE + 1
    assert lines[0] == " " * (HEX_BOARD_RADIUS + 1) + ". " * (HEX_BOARD_RADIUS + 1)


def test_format_board_rejects_unknown_values():
    board = [[Tile.EMPTY] * ARRAY_BOARD_SIZE for _ in range(ARRAY_BOARD_SIZE)]
    board[0][0] = 9
    with pytest.raises(ValueError):
        format_board(board)


def test_format_board_shows_illegal_tiles():
    board = [[Tile.ILLEGAL]]
    assert format_board(board).endswith("X \n")


def test_position_format_turn_and_score():
    text = initial_position().format()
    assert "Turn: BLACK\n" in text
    assert text.endswith("Score is  W: 4  B: 3\n")


def test_position_format_unknown_turn():
    pos = initial_position()
    pos.turn = Tile.EMPTY
    assert "Turn: -\n" in pos.format()


def test_legal_moves_include_worked_examples():
    pos = initial_position()
    moves = pos.legal_moves(Tile.BLACK)
    assert Move(7, 9, Tile.BLACK) in moves
    assert Move(5, 7, Tile.BLACK) in moves
    assert Move(0, 7, Tile.BLACK) not in moves


def test_legal_moves_are_legal_empty_cells():
    pos = initial_position()
    for color in (Tile.WHITE, Tile.BLACK):
        moves = pos.legal_moves(color)
        assert moves
        for move in moves:
            assert pos.board[move.row][move.col] is Tile.EMPTY
            assert pos.is_legal(move)
            assert pos.is_legal_at(move.row, move.col, color)


def test_play_flips_captured_pieces():
    pos = initial_position()
    assert pos.play(Move(7, 9, Tile.BLACK)) is True
    assert pos.board[7][9] is Tile.BLACK
    assert pos.board[7][8] is Tile.BLACK
    assert pos.board[7][7] is Tile.BLACK
    assert pos.turn is Tile.WHITE
    assert pos.score[Tile.BLACK] == 6
    assert _count(pos, Tile.BLACK) == pos.score[Tile.BLACK]
    assert _count(pos, Tile.WHITE) == pos.score[Tile.WHITE]


def test_play_keeps_scores_consistent_for_every_first_move():
    start = initial_position()
    for move in start.legal_moves(Tile.BLACK):
        pos = start.copy()
        pos.play(move)
        assert pos.score[Tile.WHITE] + pos.score[Tile.BLACK] == 8
        assert pos.score[Tile.BLACK] > start.score[Tile.BLACK]
        assert _count(pos, Tile.BLACK) == pos.score[Tile.BLACK]


def test_play_illegal_move_changes_nothing():
    pos = initial_position()
    before = pos.copy()
    assert pos.play(Move(0, 7, Tile.BLACK)) is False
    assert pos == before


def test_play_null_move_passes_turn():
    pos = initial_position()
    before = pos.copy()
    assert pos.play(null_move(Tile.BLACK)) is True
    assert pos.turn is Tile.WHITE
    assert pos.board == before.board
    assert pos.score == before.score


def test_play_outside_board_raises():
    pos = initial_position()
    with pytest.raises(ValueError):
        pos.play(Move(ARRAY_BOARD_SIZE, 0, Tile.BLACK))


def test_is_legal_rejects_occupied_and_outside():
    pos = initial_position()
    r = HEX_BOARD_RADIUS
    assert pos.is_legal(Move(r, r, Tile.BLACK)) is False
    assert pos.is_legal(Move(-1, 3, Tile.BLACK)) is False
    assert pos.is_legal(Move(3, ARRAY_BOARD_SIZE, Tile.BLACK)) is False
    assert pos.is_legal(null_move(Tile.BLACK)) is False
    assert pos.is_legal(Move(0, 0, Tile.BLACK)) is False


def test_copy_is_independent():
    pos = initial_position()
    clone = pos.copy()
    clone.play(Move(7, 9, Tile.BLACK))
    assert pos.board[7][9] is Tile.EMPTY
    assert pos.score[Tile.BLACK] == 3
    assert pos.turn is Tile.BLACK


def test_can_move_and_is_over_at_start():
    pos = initial_position()
    assert pos.can_move(Tile.WHITE) is True
    assert pos.can_move(Tile.BLACK) is True
    assert pos.is_over() is False


def test_is_over_when_only_one_color_remains():
    pos = initial_position()
    pos.board = [
        [Tile.WHITE if cell is Tile.BLACK else cell for cell in row] for row in pos.board
    ]
    assert pos.can_move(Tile.BLACK) is False
    assert pos.can_move(Tile.WHITE) is False
    assert pos.is_over() is True
    assert pos.legal_moves(Tile.WHITE) == []


def test_describe_result_white_wins():
    pos = initial_position()
    assert describe_result(pos, "alice", "bob") == "WHITE WON! (alice) Score W:4 B:3"


def test_describe_result_black_wins():
    pos = Position(initial_position().board, {Tile.WHITE: 2, Tile.BLACK: 6}, Tile.WHITE)
    assert describe_result(pos, "alice", "bob") == "BLACK WON! (bob) Score W:2 B:6"


def test_describe_result_draw():
    pos = Position(initial_position().board, {Tile.WHITE: 5, Tile.BLACK: 5}, Tile.WHITE)
    assert describe_result(pos, "alice", "bob") == "DRAW! Score W:5 B:5"


def test_illegal_move_message_null():
    message = illegal_move_message("bob", null_move(Tile.BLACK))
    assert message == (
        "Player: bob tried an illegal move and lost the game!\nIllegal move:NULL MOVE"
    )


def test_illegal_move_message_coordinates():
    message = illegal_move_message("bob", Move(3, 4, Tile.WHITE))
    assert message == (
        "Player: bob tried an illegal move and lost the game!\nIllegal move:( 3, 4 )"
    )