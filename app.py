from __future__ import annotations

import os
import random
import sys
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

# Ensure package imports work when executed directly from repo root or as module
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

try:
    from .game import (  # type: ignore
        DEFAULT_DEPTH,
        AiPlayer,
        GameState,
        InvalidMove,
        InvalidState,
        Piece,
        apply_move,
        evaluate,
        legal_moves,
        new_game,
        score_moves,
        validate_state,
    )
    from .superttt_core.config import parse_piece  # type: ignore
    from .superttt_core.wire import move_from_json, move_to_json, state_from_json, state_to_json  # type: ignore
except ImportError:
    from game import (  # type: ignore
        DEFAULT_DEPTH,
        AiPlayer,
        GameState,
        InvalidMove,
        InvalidState,
        Piece,
        apply_move,
        evaluate,
        legal_moves,
        new_game,
        score_moves,
        validate_state,
    )
    from superttt_core.config import parse_piece  # type: ignore
    from superttt_core.wire import move_from_json, move_to_json, state_from_json, state_to_json  # type: ignore

# Search cost grows with branching^depth; requests are capped here.
MAX_DEPTH = int(os.getenv("SUPERTTT_MAX_DEPTH", "3"))

app = Flask(__name__)


def _error(message: str, status: int = 400) -> Tuple[Any, int]:
    return jsonify({"ok": False, "error": message}), status


def _legal_json(state: GameState) -> list:
    return [move_to_json(m) for m in legal_moves(state)]


def _state_payload(state: GameState) -> Dict[str, Any]:
    s_json = state_to_json(state)
    return {"ok": True, "state": s_json, "legalMoves": _legal_json(state), "winner": s_json["winner"]}


def _read_state(body: Dict[str, Any]) -> GameState:
    s_in = body.get("state")
    if not isinstance(s_in, dict):
        raise InvalidState("state required")
    return validate_state(state_from_json(s_in))


def _read_piece(body: Dict[str, Any], default: Piece) -> Piece:
    raw = body.get("piece")
    return default if raw is None else parse_piece(str(raw))


def _read_depth(body: Dict[str, Any]) -> int:
    depth = int(body.get("depth", DEFAULT_DEPTH))
    if depth < 1 or depth > MAX_DEPTH:
        raise ValueError(f"depth must be between 1 and {MAX_DEPTH}")
    return depth


@app.get("/")
def index() -> Any:
    return jsonify({
        "ok": True,
        "service": "superttt",
        "defaultDepth": DEFAULT_DEPTH,
        "maxDepth": MAX_DEPTH,
        "endpoints": ["/api/new", "/api/legal", "/api/move", "/api/ai", "/api/evaluate"],
    })


@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        first = _read_piece({"piece": body.get("first")}, Piece.X)
        state = new_game(game_id=int(body.get("id", 0)), first=first)
    except (ValueError, TypeError) as e:
        return _error(f"bad request: {e}")
    return jsonify(_state_payload(state))


@app.post("/api/legal")
def api_legal() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        state = _read_state(body)
    except (ValueError, TypeError) as e:
        return _error(f"bad state: {e}")
    return jsonify({"ok": True, "legalMoves": _legal_json(state)})


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        state = _read_state(body)
        move = move_from_json(body.get("move"))
        piece = _read_piece(body, state.next_piece)
    except (ValueError, TypeError) as e:
        return _error(f"bad request: {e}")
    if state.is_finished:
        return _error("game is already finished")
    try:
        next_state = apply_move(state, move, piece)
    except InvalidMove as e:
        return jsonify({"ok": False, "error": f"Illegal move: {e}", "legalMoves": _legal_json(state)}), 400
    return jsonify(_state_payload(next_state))


@app.post("/api/ai")
def api_ai() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        state = _read_state(body)
        piece = _read_piece(body, state.next_piece)
        depth = _read_depth(body)
        seed: Optional[int] = None if body.get("seed") is None else int(body["seed"])
    except (ValueError, TypeError) as e:
        return _error(f"bad request: {e}")
    ai = AiPlayer(piece, depth=depth, rng=random.Random(seed))
    move = ai.decide(state)
    if move is None:
        return jsonify({"ok": True, "move": None, "state": state_to_json(state), "legalMoves": _legal_json(state)})
    payload = _state_payload(apply_move(state, move, piece))
    payload["move"] = move_to_json(move)
    return jsonify(payload)


@app.post("/api/evaluate")
def api_evaluate() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        state = _read_state(body)
        piece = _read_piece(body, state.next_piece)
        depth = _read_depth(body)
    except (ValueError, TypeError) as e:
        return _error(f"bad request: {e}")
    scored = [] if state.is_finished else score_moves(state, depth, piece)
    return jsonify({
        "ok": True,
        "piece": piece.name,
        "score": evaluate(state, piece),
        "moves": [{"move": move_to_json(m), "value": v} for m, v in scored],
    })


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "5000")), debug=debug)
