from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

Line = Tuple[int, int, int]


class Piece(IntEnum):
    """Cell marks and board outcomes. DRAW is an outcome only, never a cell mark."""
    EMPTY = 0
    X = 1
    O = 2
    DRAW = 3

    @property
    def symbol(self) -> str:
        return {Piece.EMPTY: '.', Piece.X: 'X', Piece.O: 'O', Piece.DRAW: '-'}[self]


PLAYERS = (Piece.X, Piece.O)

# Rows, then columns, then diagonals. The order decides which line is reported.
WIN_LINES: Tuple[Line, ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


def other_piece(piece: Piece) -> Piece:
    """Returns the opposing player piece."""
    if piece == Piece.X:
        return Piece.O
    if piece == Piece.O:
        return Piece.X
    raise ValueError(f'not a player piece: {piece!r}')


def check_outcome(cells: Sequence[Piece]) -> Tuple[Optional[Piece], Optional[Line]]:
    """
    Scores one 3x3 grid of marks.
    Returns (winner, line) for the first completed line, (DRAW, None) for a full
    grid without a line, and (None, None) while the grid is still open.
    Only X and O can complete a line, so DRAW marks (used when scoring the
    meta-board) never count toward either player.
    """
    for line in WIN_LINES:
        a, b, c = line
        if cells[a] in PLAYERS and cells[a] == cells[b] == cells[c]:
            return Piece(cells[a]), line
    if all(cell != Piece.EMPTY for cell in cells):
        return Piece.DRAW, None
    return None, None


@dataclass(frozen=True)
class SubBoard:
    """One of the nine tic-tac-toe boards, with its derived outcome."""
    id: int
    cells: Tuple[Piece, ...]  # row-major, length 9
    winner: Optional[Piece] = None
    winning_line: Optional[Line] = None

    @classmethod
    def empty(cls, board_id: int) -> 'SubBoard':
        return cls(id=board_id, cells=(Piece.EMPTY,) * 9)

    @classmethod
    def from_cells(cls, board_id: int, cells: Sequence[Piece]) -> 'SubBoard':
        """Builds a sub-board and derives its outcome from the marks."""
        marks = tuple(Piece(c) for c in cells)
        winner, line = check_outcome(marks)
        return cls(id=board_id, cells=marks, winner=winner, winning_line=line)

    @property
    def is_decided(self) -> bool:
        return self.winner is not None

    def empty_squares(self) -> List[int]:
        return [i for i, cell in enumerate(self.cells) if cell == Piece.EMPTY]

    def with_mark(self, square_id: int, piece: Piece) -> 'SubBoard':
        """Returns a copy with one more mark and a refreshed outcome."""
        cells = list(self.cells)
        cells[square_id] = piece
        marks = tuple(cells)
        winner, line = check_outcome(marks)
        return replace(self, cells=marks, winner=winner, winning_line=line)

    def rows(self) -> List[str]:
        return [
            ' '.join(self.cells[r * 3 + c].symbol for c in range(3))
            for r in range(3)
        ]
