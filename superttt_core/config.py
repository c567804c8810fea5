from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .ai import DEFAULT_DEPTH
from .board import Piece

DEFAULT_SERVER = 'wss://staging.tictacyo.live'
DEFAULT_IDLE_SECONDS = 6.0
DEFAULT_POLL_SECONDS = 5.0

# Accounts on the live server are tied to a side.
KNOWN_ACCOUNTS = {
    'HotSalsa22': Piece.X,
    'BelleRocks99': Piece.O,
}


def _flag(value: Optional[str]) -> bool:
    return (value or '0').lower() in ('1', 'true', 'yes', 'on')


def parse_piece(text: str) -> Piece:
    """Parses 'X' / 'O' (or the server codes 1 / 2)."""
    norm = text.strip().upper()
    if norm in ('X', '1'):
        return Piece.X
    if norm in ('O', '2'):
        return Piece.O
    raise ValueError(f'piece must be X or O, got {text!r}')


@dataclass(frozen=True)
class BotConfig:
    server: str
    username: Optional[str]
    piece: Piece
    depth: int = DEFAULT_DEPTH
    idle_seconds: float = DEFAULT_IDLE_SECONDS
    poll_seconds: float = DEFAULT_POLL_SECONDS
    debug: bool = False


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    server: Optional[str] = None,
    username: Optional[str] = None,
    piece: Optional[str] = None,
    depth: Optional[int] = None,
    idle_seconds: Optional[float] = None,
    debug: Optional[bool] = None,
) -> BotConfig:
    """
    Resolve bot settings. Explicit arguments (CLI flags) win over the environment:
    SUPERTTT_SERVER, SUPERTTT_USERNAME (or legacy `gamer`), SUPERTTT_PIECE,
    SUPERTTT_DEPTH, SUPERTTT_IDLE_SECONDS, SUPERTTT_POLL_SECONDS, SUPERTTT_DEBUG.
    Without a piece the side comes from KNOWN_ACCOUNTS, defaulting to X.
    """
    env = os.environ if env is None else env
    user = username or env.get('SUPERTTT_USERNAME') or env.get('gamer')
    piece_text = piece or env.get('SUPERTTT_PIECE')
    if piece_text:
        side = parse_piece(piece_text)
    else:
        side = KNOWN_ACCOUNTS.get(user or '', Piece.X)
    cfg = BotConfig(
        server=server or env.get('SUPERTTT_SERVER', DEFAULT_SERVER),
        username=user,
        piece=side,
        depth=int(depth if depth is not None else env.get('SUPERTTT_DEPTH', DEFAULT_DEPTH)),
        idle_seconds=float(idle_seconds if idle_seconds is not None
                           else env.get('SUPERTTT_IDLE_SECONDS', DEFAULT_IDLE_SECONDS)),
        poll_seconds=float(env.get('SUPERTTT_POLL_SECONDS', DEFAULT_POLL_SECONDS)),
        debug=debug if debug is not None else _flag(env.get('SUPERTTT_DEBUG')),
    )
    if cfg.depth < 1:
        raise ValueError(f'depth must be >= 1, got {cfg.depth}')
    return cfg
