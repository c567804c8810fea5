from __future__ import annotations

import os
import random
import time
from typing import Optional

from .board import PLAYERS, Piece
from .moves import Move
from .search import choose_best_move
from .state import GameState, validate_state

DEFAULT_DEPTH = 3


class AiPlayer:
    """Chooses moves for one fixed piece for the lifetime of a session."""

    def __init__(self, piece: Piece, depth: int = DEFAULT_DEPTH, rng: Optional[random.Random] = None):
        if piece not in PLAYERS:
            raise ValueError(f'AI must play X or O, got {piece!r}')
        if depth < 1:
            raise ValueError(f'search depth must be >= 1, got {depth}')
        self.piece = Piece(piece)
        self.depth = depth
        self.rng = rng or random.Random()
        self.debug = os.getenv('SUPERTTT_DEBUG', '0').lower() in ('1', 'true', 'yes', 'on')

    def decide(self, state: GameState, depth: Optional[int] = None) -> Optional[Move]:
        """
        Returns the move to play, or None when the game is over or nothing is legal.
        The snapshot is validated before searching; invalid input raises InvalidState.
        """
        depth = self.depth if depth is None else depth
        if depth < 1:
            raise ValueError(f'search depth must be >= 1, got {depth}')
        validate_state(state)
        if state.is_finished:
            return None
        start = time.perf_counter()
        move = choose_best_move(state, depth, self.piece, self.rng)
        if self.debug:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            print(f"[ai] {self.piece.name} depth={depth} move={move} in {elapsed_ms:.1f}ms")
        return move
