"""Move selection: static evaluation, minimax, alpha-beta and random play."""

from __future__ import annotations

import math
import random

from hexthello.board import Position
from hexthello.constants import Move, Tile, null_move, other_side

DEFAULT_DEPTH = 3


def evaluate(position: Position, player: int) -> int:
    """Score difference from the point of view of `player`."""
    player = Tile(player)
    return position.score[player] - position.score[other_side(player)]


def minimax(position: Position, depth: int, active: int, maximizing: bool, me: int) -> int:
    """Plain minimax value of `position` for `me`, with `active` to move."""
    if depth == 0 or not position.can_move(active):
        return evaluate(position, me)

    values = []
    for move in position.legal_moves(active):
        child = position.copy()
        child.play(move)
        values.append(minimax(child, depth - 1, other_side(active), not maximizing, me))
    return max(values) if maximizing else min(values)


def _choose(position: Position, player: int, depth: int, value_of) -> Move:
    if depth < 1:
        raise ValueError(f"search depth must be at least 1, got {depth}")
    best: Move | None = None
    best_value = -math.inf
    for move in position.legal_moves(player):
        child = position.copy()
        child.play(move)
        value = value_of(child)
        if value > best_value:
            best_value = value
            best = move
    return best if best is not None else null_move(player)


def best_move(position: Position, player: int, depth: int = DEFAULT_DEPTH) -> Move:
    """Best move for `player` by minimax; the null move when none is legal."""
    player = Tile(player)
    opponent = other_side(player)
    return _choose(
        position,
        player,
        depth,
        lambda child: minimax(child, depth - 1, opponent, False, player),
    )


def minimax_ab(
    position: Position,
    depth: int,
    active: int,
    maximizing: bool,
    me: int,
    alpha: float = -math.inf,
    beta: float = math.inf,
) -> int:
    """Minimax value of `position` for `me` with alpha-beta pruning."""
    if depth == 0 or not position.can_move(active):
        return evaluate(position, me)

    extreme = -math.inf if maximizing else math.inf
    for move in position.legal_moves(active):
        child = position.copy()
        child.play(move)
        value = minimax_ab(child, depth - 1, other_side(active), not maximizing, me, alpha, beta)
        if maximizing:
            extreme = max(extreme, value)
            alpha = max(alpha, extreme)
        else:
            extreme = min(extreme, value)
            beta = min(beta, extreme)
        if beta <= alpha:
            break
    return int(extreme)


def best_move_ab(position: Position, player: int, depth: int = DEFAULT_DEPTH) -> Move:
    """Best move for `player` by alpha-beta search; the null move when none is legal."""
    player = Tile(player)
    opponent = other_side(player)
    return _choose(
        position,
        player,
        depth,
        lambda child: minimax_ab(child, depth - 1, opponent, False, player),
    )


def random_move(position: Position, color: int, rng: random.Random | None = None) -> Move:
    """A uniformly chosen legal move for `color`; the null move when none is legal."""
    moves = position.legal_moves(color)
    if not moves:
        return null_move(color)
    return (rng or random).choice(moves)