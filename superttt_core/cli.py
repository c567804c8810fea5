from __future__ import annotations

import argparse
import json
import random
from typing import List, Optional

from .ai import DEFAULT_DEPTH, AiPlayer
from .board import Piece, other_piece
from .config import parse_piece
from .moves import Move, apply_move, is_legal, legal_moves
from .state import GameState, new_game
from .wire import state_from_json


def _load_state(path: Optional[str]) -> GameState:
    if not path:
        return new_game()
    with open(path, 'r', encoding='utf-8') as f:
        obj = json.load(f)
    # Accept either one snapshot or a full history list.
    if isinstance(obj, list):
        obj = obj[-1]
    return state_from_json(obj)


def _announce_result(state: GameState) -> None:
    if state.winner == Piece.DRAW:
        print('Game drawn.')
    elif state.winner is not None:
        print(f'{state.winner.name} wins along meta-line {state.winning_line}!')


def prompt_human_move(state: GameState) -> Move:
    if not legal_moves(state):
        raise RuntimeError('No legal moves available')
    while True:
        text = input('Enter your move as board,square (0-8 each): ').strip()
        sep = ',' if ',' in text else ' '
        try:
            b_s, s_s = [t for t in text.split(sep) if t != '']
            move = (int(b_s), int(s_s))
        except Exception:
            print('Could not parse. Try again.')
            continue
        if is_legal(state, move):
            return move
        print('Illegal move. Try again.')


def play(ai: AiPlayer, state: GameState) -> GameState:
    human = other_piece(ai.piece)
    print(f"AI plays {ai.piece.name}. You are {human.name}.")
    print(state.pretty())
    while not state.is_finished:
        mover = state.next_piece
        if mover == ai.piece:
            move = ai.decide(state)
            if move is None:
                break
            print(f"AI plays {move}")
        else:
            move = prompt_human_move(state)
        state = apply_move(state, move, mover)
        print(state.pretty())
    _announce_result(state)
    return state


def selfplay(x_ai: AiPlayer, o_ai: AiPlayer, state: GameState, verbose: bool = True) -> GameState:
    players = {Piece.X: x_ai, Piece.O: o_ai}
    while not state.is_finished:
        mover = state.next_piece
        move = players[mover].decide(state)
        if move is None:
            break
        state = apply_move(state, move, mover)
        if verbose:
            print(f"{mover.name} -> {move}")
    if verbose:
        print(state.pretty())
        _announce_result(state)
    return state


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Super tic-tac-toe minimax engine')
    parser.add_argument('--state', default=None, help='JSON snapshot (or history list) to analyse')
    parser.add_argument('--piece', default=None, help='Side the engine plays (X or O); default: side to move')
    parser.add_argument('--depth', type=int, default=DEFAULT_DEPTH, help='Search depth in plies')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for tie-breaking')
    parser.add_argument('--play', action='store_true', help='Play against the engine')
    parser.add_argument('--selfplay', action='store_true', help='Let the engine play both sides')
    args = parser.parse_args(argv)

    rng = random.Random(args.seed)
    state = _load_state(args.state)
    piece = parse_piece(args.piece) if args.piece else state.next_piece

    if args.selfplay:
        selfplay(AiPlayer(Piece.X, args.depth, rng), AiPlayer(Piece.O, args.depth, rng), state)
        return
    ai = AiPlayer(piece, args.depth, rng)
    if args.play:
        play(ai, state)
        return

    print(state.pretty())
    move = ai.decide(state)
    if move is None:
        print(f'No move available for {piece.name}.')
        _announce_result(state)
    else:
        print(f'Suggested move for {piece.name}: board {move[0]}, square {move[1]}')
