from __future__ import annotations

from dataclasses import replace
from typing import Iterator, List, Tuple

from .board import PLAYERS, Piece, check_outcome, other_piece
from .errors import InvalidMove
from .state import GameState

Move = Tuple[int, int]  # (board_id, square_id)


def generate_moves(state: GameState) -> Iterator[Move]:
    """Yields every legal move in ascending (board_id, square_id) order."""
    for board in state.boards:
        # Decided boards are closed even if they still have empty cells.
        if board.winner is not None:
            continue
        for square_id in board.empty_squares():
            yield (board.id, square_id)


def legal_moves(state: GameState) -> List[Move]:
    return list(generate_moves(state))


def is_legal(state: GameState, move: Move) -> bool:
    board_id, square_id = move
    if not (0 <= board_id < 9 and 0 <= square_id < 9):
        return False
    board = state.boards[board_id]
    return board.winner is None and board.cells[square_id] == Piece.EMPTY


def apply_move(state: GameState, move: Move, piece: Piece) -> GameState:
    """
    Places `piece` and returns the resulting state; `state` itself is untouched.
    The target sub-board and the meta-board are re-scored and the turn passes
    to the other piece. The mark placed is whatever the caller passes, not
    `state.next_piece`, so search can simulate either side.
    """
    board_id, square_id = move
    if piece not in PLAYERS:
        raise InvalidMove(f'cannot place {piece!r}; only X or O can move')
    if not (0 <= board_id < 9 and 0 <= square_id < 9):
        raise InvalidMove(f'move {move!r} is off the board')
    board = state.boards[board_id]
    if board.winner is not None:
        raise InvalidMove(f'board {board_id} is already decided ({board.winner.name})')
    if board.cells[square_id] != Piece.EMPTY:
        raise InvalidMove(f'square {square_id} of board {board_id} is occupied')

    boards = list(state.boards)
    boards[board_id] = board.with_mark(square_id, piece)
    next_state = replace(state, boards=tuple(boards), next_piece=other_piece(piece))
    winner, line = check_outcome(next_state.meta_cells())
    return replace(next_state, winner=winner, winning_line=line)
