"""
Transport-independent handling of the live game feed.

The session owns the authoritative GameState. Server events are applied to
it with the same transition the search uses; the engine only ever receives
immutable snapshots. Moves chosen here are handed back to the transport and
are applied locally only once the server echoes them as an `update`.
"""
from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .ai import AiPlayer
from .board import Line, Piece
from .errors import InvalidMove, InvalidState
from .moves import Move, apply_move
from .state import GameState
from .wire import piece_from_wire, state_from_json


class GameSession:
    def __init__(
        self,
        player: AiPlayer,
        username: Optional[str] = None,
        idle_seconds: float = 6.0,
        clock: Callable[[], float] = time.monotonic,
        strict: bool = False,
        debug: bool = False,
    ):
        self.player = player
        self.username = username
        self.idle_seconds = idle_seconds
        self.clock = clock
        self.strict = strict
        self.debug = debug
        self.state: Optional[GameState] = None
        self.last_move_at = clock()
        self._lock = threading.Lock()
        self._deciding = 0
        # board_id -> (winner, line) reported by the server ahead of the marks
        self._pending: Dict[int, Tuple[Optional[Piece], Optional[Line]]] = {}

    @property
    def piece(self) -> Piece:
        return self.player.piece

    def snapshot(self) -> Optional[GameState]:
        with self._lock:
            return self.state

    # ---------- server events ----------

    def on_player_information(self, uuid: str, username: Optional[str], playing_for: Any) -> None:
        try:
            reported = piece_from_wire(playing_for)
        except ValueError:
            reported = None
        if reported != self.piece:
            print(f"[session] server says {username!r} plays {playing_for!r}; keeping {self.piece.name}")
        elif self.debug:
            print(f"[session] identity confirmed: {username} ({uuid}) plays {self.piece.name}")

    def on_history(self, history: Sequence[Any]) -> None:
        """Adopts the last snapshot of the game history."""
        if not history:
            return
        state = state_from_json(history[-1])
        with self._lock:
            self.state = state
            self.last_move_at = self.clock()
            self._pending.clear()
        if self.debug:
            print(f"[session] history received; game {state.id}, {len(history)} snapshot(s)")

    def on_update(self, game_id: int, board_id: int, square_id: int, piece_code: Any, username: Optional[str]) -> Optional[Move]:
        """Applies one server-confirmed move; returns our reply when the opponent moved."""
        with self._lock:
            if self.state is None:
                print("[session] update before history; ignored")
                return None
            if int(game_id) != self.state.id:
                print(f"[session] update for game {game_id} while tracking {self.state.id}; ignored")
                return None
            self.last_move_at = self.clock()
            try:
                piece = piece_from_wire(piece_code)
                self.state = apply_move(self.state, (int(board_id), int(square_id)), piece)
            except (InvalidMove, InvalidState) as e:
                print(f"[session] rejected update from {username!r}: {e}")
                if self.strict:
                    raise
                return None
            self._settle_pending(int(board_id))
            state = self.state
        if piece == self.piece or state.is_finished:
            return None
        return self._decide(state)

    def on_end(
        self,
        game_id: int,
        board_id: Optional[int],
        winner_code: Any,
        winning_line: Optional[List[int]],
        winner_username: Optional[str] = None,
    ) -> None:
        """
        Records a server-reported outcome for one sub-board, or the whole game when board_id is None.
        A sub-board outcome that arrives before the update completing it is held
        until the local marks agree with it.
        """
        winner = None if winner_code is None else piece_from_wire(winner_code, outcome=True)
        line = tuple(int(i) for i in winning_line) if winning_line else None
        with self._lock:
            if self.state is None or int(game_id) != self.state.id:
                return
            if board_id is None:
                self.state = self.state.with_game_outcome(winner, line)
                print(f"[session] game {game_id} over: {winner.name if winner else None} ({winner_username})")
            else:
                self._pending[int(board_id)] = (winner, line)
                self._settle_pending(int(board_id))

    def _settle_pending(self, board_id: int) -> None:
        # Caller holds self._lock.
        if board_id not in self._pending:
            return
        winner, line = self._pending[board_id]
        if not _marks_support(self.state.boards[board_id].cells, winner, line):
            if self.debug:
                print(f"[session] holding outcome of board {board_id} until its marks arrive")
            return
        del self._pending[board_id]
        self.state = self.state.with_board_outcome(board_id, winner, line)

    # ---------- decisions ----------

    def idle_due(self, now: Optional[float] = None) -> bool:
        now = self.clock() if now is None else now
        with self._lock:
            if self.state is None or self.state.is_finished or self._deciding:
                return False
            return now - self.last_move_at > self.idle_seconds

    def poll(self, now: Optional[float] = None) -> Optional[Move]:
        """Liveness safeguard: forces a decision when nobody has moved for too long."""
        if not self.idle_due(now):
            return None
        print("[session] Dispatched forced move")
        state = self.snapshot()
        return self._decide(state) if state is not None else None

    def _decide(self, state: GameState) -> Optional[Move]:
        with self._lock:
            self._deciding += 1
        start = time.perf_counter()
        try:
            move = self.player.decide(state)
        finally:
            with self._lock:
                self._deciding -= 1
                # The idle window restarts once the search is done.
                self.last_move_at = self.clock()
        print(f"[session] Move took {(time.perf_counter() - start) * 1000.0:.0f}ms")
        return move


def _marks_support(cells, winner: Optional[Piece], line: Optional[Line]) -> bool:
    """True when the marks on a sub-board already show the reported outcome."""
    if winner == Piece.DRAW:
        return all(c != Piece.EMPTY for c in cells)
    if winner is not None and line is not None:
        return all(cells[i] == winner for i in line)
    return True
