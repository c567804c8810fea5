from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .board import PLAYERS, Line, Piece, SubBoard, check_outcome
from .errors import InvalidState


@dataclass(frozen=True)
class GameState:
    """Snapshot of the nine sub-boards, the meta-board outcome and the side to move."""
    id: int
    boards: Tuple[SubBoard, ...]  # index == meta-board position
    next_piece: Piece
    winner: Optional[Piece] = None
    winning_line: Optional[Line] = None

    @property
    def is_finished(self) -> bool:
        return self.winner is not None

    def meta_cells(self) -> Tuple[Piece, ...]:
        """Sub-board outcomes as marks on the meta-board; undecided boards read as EMPTY."""
        return tuple(Piece.EMPTY if b.winner is None else b.winner for b in self.boards)

    def with_board_outcome(self, board_id: int, winner: Optional[Piece], line: Optional[Line]) -> 'GameState':
        """Overrides one sub-board's outcome (server-reported) and re-scores the meta-board."""
        boards = list(self.boards)
        boards[board_id] = replace(boards[board_id], winner=winner, winning_line=line)
        return rescore(replace(self, boards=tuple(boards)))

    def with_game_outcome(self, winner: Optional[Piece], line: Optional[Line]) -> 'GameState':
        return replace(self, winner=winner, winning_line=line)

    def pretty(self) -> str:
        """Renders the 9x9 grid with decided sub-boards summarised by their outcome."""
        out: List[str] = []
        for meta_row in range(3):
            blocks = [self.boards[meta_row * 3 + c] for c in range(3)]
            for r in range(3):
                parts = []
                for b in blocks:
                    if b.winner is not None and r == 1:
                        parts.append(f'  {b.winner.symbol}  ')
                    elif b.winner is not None:
                        parts.append('     ')
                    else:
                        parts.append(b.rows()[r])
                out.append(' | '.join(parts))
            if meta_row < 2:
                out.append('------+-------+------')
        return '\n'.join(out)


def new_game(game_id: int = 0, first: Piece = Piece.X) -> GameState:
    return GameState(
        id=game_id,
        boards=tuple(SubBoard.empty(i) for i in range(9)),
        next_piece=first,
    )


def rescore(state: GameState) -> GameState:
    """Recomputes the overall outcome from the sub-board outcomes."""
    winner, line = check_outcome(state.meta_cells())
    return replace(state, winner=winner, winning_line=line)


def _check_line_invariant(label: str, cells, winner: Optional[Piece], line: Optional[Line]) -> None:
    if (winner in PLAYERS) != (line is not None):
        raise InvalidState(f'{label}: winning line must be set exactly when a player won')
    if line is not None:
        if len(line) != 3 or any(not 0 <= i < 9 for i in line):
            raise InvalidState(f'{label}: bad winning line {line!r}')
        if any(cells[i] != winner for i in line):
            raise InvalidState(f'{label}: winning line {line!r} does not match the marks')


def validate_state(state: GameState) -> GameState:
    """
    Rejects malformed snapshots before any search starts.
    Checks shape, mark values, the winner/line invariant of every board, and
    that each undecided sub-board is genuinely still open.
    """
    if len(state.boards) != 9:
        raise InvalidState(f'expected 9 sub-boards, got {len(state.boards)}')
    if state.next_piece not in PLAYERS:
        raise InvalidState(f'next piece must be X or O, got {state.next_piece!r}')
    for idx, board in enumerate(state.boards):
        label = f'board {idx}'
        if board.id != idx:
            raise InvalidState(f'{label}: id {board.id} does not match its position')
        if len(board.cells) != 9:
            raise InvalidState(f'{label}: expected 9 cells, got {len(board.cells)}')
        if any(c not in (Piece.EMPTY, Piece.X, Piece.O) for c in board.cells):
            raise InvalidState(f'{label}: cells may only hold EMPTY, X or O')
        _check_line_invariant(label, board.cells, board.winner, board.winning_line)
        derived, _ = check_outcome(board.cells)
        if board.winner is None and derived is not None:
            raise InvalidState(f'{label}: marks decide the board but no outcome is recorded')
        if board.winner == Piece.DRAW and derived in PLAYERS:
            raise InvalidState(f'{label}: recorded as a draw but {derived.name} has a line')
    _check_line_invariant('game', state.meta_cells(), state.winner, state.winning_line)
    return state
