import random

import pytest

from hexthello.board import initial_position
from hexthello.constants import Tile, other_side
from hexthello.search import (
    best_move,
    best_move_ab,
    evaluate,
    minimax,
    minimax_ab,
    random_move,
)


def _empty_position():
    position = initial_position()
    for row in position.board:
        for index, value in enumerate(row):
            if value in (Tile.WHITE, Tile.BLACK):
                row[index] = Tile.EMPTY
    return position


def _midgame():
    position = initial_position()
    rng = random.Random(7)
    for _ in range(6):
        position.play(random_move(position, position.turn, rng))
    return position


def test_evaluate_initial():
    position = initial_position()
    assert evaluate(position, Tile.BLACK) == -1
    assert evaluate(position, Tile.WHITE) == 1


def test_minimax_depth_zero_is_evaluation():
    position = initial_position()
    assert minimax(position, 0, Tile.BLACK, True, Tile.BLACK) == evaluate(position, Tile.BLACK)


def test_minimax_without_moves_is_evaluation():
    position = _empty_position()
    assert minimax(position, 3, Tile.BLACK, True, Tile.WHITE) == evaluate(position, Tile.WHITE)


@pytest.mark.parametrize("depth", [1, 2, 3])
def test_alpha_beta_matches_minimax(depth):
    position = _midgame()
    active = position.turn
    assert minimax_ab(position, depth, active, True, active) == minimax(
        position, depth, active, True, active
    )


def test_best_move_depth_one_maximises_immediate_score():
    position = initial_position()
    move = best_move(position, Tile.BLACK, 1)
    values = []
    for candidate in position.legal_moves(Tile.BLACK):
        child = position.copy()
        child.play(candidate)
        values.append(evaluate(child, Tile.BLACK))
    chosen = position.copy()
    chosen.play(move)
    assert evaluate(chosen, Tile.BLACK) == max(values)


def test_best_move_is_legal_and_optimal():
    position = _midgame()
    player = position.turn
    move = best_move(position, player, 2)
    assert position.is_legal(move)
    values = []
    for candidate in position.legal_moves(player):
        child = position.copy()
        child.play(candidate)
        values.append(minimax(child, 1, other_side(player), False, player))
    chosen = position.copy()
    chosen.play(move)
    assert minimax(chosen, 1, other_side(player), False, player) == max(values)


@pytest.mark.parametrize("depth", [1, 2, 3])
def test_best_move_ab_matches_best_move(depth):
    position = _midgame()
    player = position.turn
    assert best_move_ab(position, player, depth) == best_move(position, player, depth)


def test_best_move_does_not_modify_position():
    position = initial_position()
    before = position.copy()
    best_move_ab(position, Tile.BLACK, 2)
    assert position == before


def test_best_move_without_moves_is_null():
    position = _empty_position()
    assert best_move(position, Tile.BLACK, 2).is_null()


def test_best_move_rejects_zero_depth():
    with pytest.raises(ValueError):
        best_move(initial_position(), Tile.BLACK, 0)


def test_random_move_is_legal():
    position = initial_position()
    rng = random.Random(1)
    for _ in range(20):
        move = random_move(position, Tile.BLACK, rng)
        assert move in position.legal_moves(Tile.BLACK)


def test_random_move_reproducible_with_seed():
    position = initial_position()
    first = random_move(position, Tile.BLACK, random.Random(3))
    second = random_move(position, Tile.BLACK, random.Random(3))
    assert first in position.legal_moves(Tile.BLACK)
    assert first.color == Tile.BLACK
    assert second == first


def test_random_move_without_moves_is_null():
    move = random_move(_empty_position(), Tile.WHITE)
    assert move.is_null()
    assert move.color == Tile.WHITE