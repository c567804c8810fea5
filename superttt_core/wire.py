from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from .board import Line, Piece, SubBoard
from .errors import InvalidState
from .moves import Move
from .state import GameState

# Server piece codes. Cells use 0 for empty; outcomes use 0 for a draw.
_CELL_FROM_WIRE = {0: Piece.EMPTY, 1: Piece.X, 2: Piece.O}
_OUTCOME_FROM_WIRE = {0: Piece.DRAW, 1: Piece.X, 2: Piece.O}


def piece_from_wire(value: Any, outcome: bool = False) -> Piece:
    table = _OUTCOME_FROM_WIRE if outcome else _CELL_FROM_WIRE
    try:
        return table[int(value)]
    except (KeyError, TypeError, ValueError):
        kind = 'outcome' if outcome else 'cell'
        raise InvalidState(f'bad {kind} code {value!r}') from None


def piece_to_wire(piece: Piece) -> int:
    if piece in (Piece.EMPTY, Piece.DRAW):
        return 0
    return int(piece)


def _outcome_from_wire(value: Any) -> Optional[Piece]:
    return None if value is None else piece_from_wire(value, outcome=True)


def _outcome_to_wire(piece: Optional[Piece]) -> Optional[int]:
    return None if piece is None else piece_to_wire(piece)


def _line_from_wire(value: Any) -> Optional[Line]:
    if value is None:
        return None
    try:
        a, b, c = (int(i) for i in value)
    except (TypeError, ValueError):
        raise InvalidState(f'bad winning line {value!r}') from None
    return (a, b, c)


def board_to_json(b: SubBoard) -> Dict[str, Any]:
    return {
        "id": int(b.id),
        "positions": [piece_to_wire(c) for c in b.cells],
        "winner": _outcome_to_wire(b.winner),
        "winningLine": list(b.winning_line) if b.winning_line is not None else None,
    }


def board_from_json(obj: Dict[str, Any], default_id: int = 0) -> SubBoard:
    try:
        positions: Sequence[Any] = obj["positions"]
    except (KeyError, TypeError):
        raise InvalidState("board requires 'positions'") from None
    return SubBoard(
        id=int(obj.get("id", default_id)),
        cells=tuple(piece_from_wire(p) for p in positions),
        winner=_outcome_from_wire(obj.get("winner")),
        winning_line=_line_from_wire(obj.get("winningLine")),
    )


def state_to_json(s: GameState) -> Dict[str, Any]:
    return {
        "id": int(s.id),
        "boards": [board_to_json(b) for b in s.boards],
        "winner": _outcome_to_wire(s.winner),
        "winningLine": list(s.winning_line) if s.winning_line is not None else None,
        "nextPiece": piece_to_wire(s.next_piece),
    }


def state_from_json(obj: Dict[str, Any]) -> GameState:
    """Decodes a server snapshot. Extra keys (e.g. winnerUsername) are ignored."""
    if not isinstance(obj, dict):
        raise InvalidState("state must be an object")
    try:
        boards_in = obj["boards"]
        next_piece = piece_from_wire(obj.get("nextPiece", 1))
    except KeyError:
        raise InvalidState("state requires 'boards'") from None
    if not isinstance(boards_in, list):
        raise InvalidState("'boards' must be a list")
    return GameState(
        id=int(obj.get("id", 0)),
        boards=tuple(board_from_json(b, default_id=i) for i, b in enumerate(boards_in)),
        next_piece=next_piece,
        winner=_outcome_from_wire(obj.get("winner")),
        winning_line=_line_from_wire(obj.get("winningLine")),
    )


def move_to_json(move: Move) -> Dict[str, int]:
    return {"boardId": int(move[0]), "squareId": int(move[1])}


def move_from_json(obj: Any) -> Move:
    """Accepts {"boardId", "squareId"} or a [board, square] pair."""
    try:
        if isinstance(obj, dict):
            return (int(obj["boardId"]), int(obj["squareId"]))
        board_id, square_id = obj
        return (int(board_id), int(square_id))
    except (KeyError, TypeError, ValueError):
        raise InvalidState(f'bad move {obj!r}') from None
