"""
Fixed-depth minimax over super tic-tac-toe states.

Whose mark is placed at each ply is driven by the `maximizing` flag passed
down from the root (`me` when maximizing, the opponent otherwise), never by
`GameState.next_piece`. No pruning: every node up to the depth bound is
visited, so callers keep the depth small.
"""
from __future__ import annotations

import random
from typing import List, Optional, Tuple

from .board import Piece, other_piece
from .errors import InvariantViolation
from .moves import Move, apply_move, generate_moves
from .state import GameState

BOARD_WIN_SCORE = 10


def evaluate(state: GameState, me: Piece) -> int:
    """+10 per sub-board won by `me`, -10 per sub-board won by the opponent."""
    opp = other_piece(me)
    score = 0
    for board in state.boards:
        if board.winner == me:
            score += BOARD_WIN_SCORE
        elif board.winner == opp:
            score -= BOARD_WIN_SCORE
    return score


def minimax(state: GameState, depth: int, maximizing: bool, me: Piece) -> int:
    if depth == 0 or state.winner is not None:
        return evaluate(state, me)

    mover = me if maximizing else other_piece(me)
    values = [
        minimax(apply_move(state, move, mover), depth - 1, not maximizing, me)
        for move in generate_moves(state)
    ]
    if not values:
        raise InvariantViolation(
            f'game {state.id} has no winner but no legal moves either'
        )
    return max(values) if maximizing else min(values)


def score_moves(state: GameState, depth: int, me: Piece) -> List[Tuple[Move, int]]:
    """Returns [(move, value)] for every root move, searched to `depth` plies."""
    if depth < 1:
        raise ValueError(f'search depth must be >= 1, got {depth}')
    return [
        (move, minimax(apply_move(state, move, me), depth - 1, False, me))
        for move in generate_moves(state)
    ]


def choose_best_move(
    state: GameState,
    depth: int,
    me: Piece,
    rng: Optional[random.Random] = None,
) -> Optional[Move]:
    """Picks uniformly among the root moves with the highest minimax value."""
    best_value: Optional[int] = None
    best_moves: List[Move] = []
    for move, value in score_moves(state, depth, me):
        if best_value is None or value > best_value:
            best_value = value
            best_moves = [move]
        elif value == best_value:
            best_moves.append(move)
    if not best_moves:
        return None
    return (rng or random).choice(best_moves)
