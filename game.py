from __future__ import annotations

# Facade module that re-exports SuperTTT core functionality.
# The Flask app, CLI and tests import from here; the single-responsibility
# modules live under superttt_core/*.

try:
    from .superttt_core.board import (  # type: ignore
        WIN_LINES,
        Piece,
        SubBoard,
        check_outcome,
        other_piece,
    )
    from .superttt_core.errors import InvalidMove, InvalidState, InvariantViolation  # type: ignore
    from .superttt_core.state import GameState, new_game, rescore, validate_state  # type: ignore
    from .superttt_core.moves import Move, apply_move, generate_moves, is_legal, legal_moves  # type: ignore
    from .superttt_core.search import choose_best_move, evaluate, minimax, score_moves  # type: ignore
    from .superttt_core.ai import DEFAULT_DEPTH, AiPlayer  # type: ignore
except ImportError:
    from superttt_core.board import (  # type: ignore
        WIN_LINES,
        Piece,
        SubBoard,
        check_outcome,
        other_piece,
    )
    from superttt_core.errors import InvalidMove, InvalidState, InvariantViolation  # type: ignore
    from superttt_core.state import GameState, new_game, rescore, validate_state  # type: ignore
    from superttt_core.moves import Move, apply_move, generate_moves, is_legal, legal_moves  # type: ignore
    from superttt_core.search import choose_best_move, evaluate, minimax, score_moves  # type: ignore
    from superttt_core.ai import DEFAULT_DEPTH, AiPlayer  # type: ignore


def decide(state: GameState, piece: Piece, depth: int = DEFAULT_DEPTH, rng=None):
    """One-shot convenience wrapper around AiPlayer.decide."""
    return AiPlayer(piece, depth=depth, rng=rng).decide(state)


def main() -> None:
    # CLI driver delegated to superttt_core.cli
    try:
        from .superttt_core.cli import main as _main  # type: ignore
    except ImportError:
        from superttt_core.cli import main as _main  # type: ignore
    _main()


if __name__ == '__main__':
    main()
