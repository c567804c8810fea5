from __future__ import annotations

import argparse
from typing import Any, List, Optional

import socketio

from .ai import AiPlayer
from .config import BotConfig, load_config
from .moves import Move
from .session import GameSession
from .wire import piece_to_wire


def _http_url(url: str) -> str:
    """The Socket.IO client expects http(s); the server is usually advertised as ws(s)."""
    if url.startswith('wss://'):
        return 'https://' + url[len('wss://'):]
    if url.startswith('ws://'):
        return 'http://' + url[len('ws://'):]
    return url


def send_move(sio: socketio.Client, session: GameSession, move: Optional[Move]) -> bool:
    """Transmits a move. The local state is left alone until the server echoes it."""
    state = session.snapshot()
    if move is None or state is None:
        return False
    board_id, square_id = move
    sio.emit('clientUpdate', (state.id, board_id, square_id, piece_to_wire(session.piece)))
    return True


def build_client(session: GameSession, debug: bool = False) -> socketio.Client:
    sio = socketio.Client()

    @sio.on('playerInformation')
    def _player_information(uuid, username, playing_for):
        session.on_player_information(uuid, username, playing_for)

    @sio.on('history')
    def _history(game_history):
        session.on_history(game_history)

    @sio.on('update')
    def _update(game_id, board_id, square_id, piece, username):
        send_move(sio, session, session.on_update(game_id, board_id, square_id, piece, username))

    @sio.on('end')
    def _end(game_id, board_id, winner, winning_line, winner_username=None):
        session.on_end(game_id, board_id, winner, winning_line, winner_username)

    @sio.on('playerList')
    def _player_list(players: List[Any]):
        if debug:
            print(f"[bot] {len(players)} player(s) connected")

    @sio.on('emote')
    def _emote(player_uuid, emote_slug):
        if debug:
            print(f"[bot] emote {emote_slug} from {player_uuid}")

    return sio


def idle_loop(sio: socketio.Client, session: GameSession, poll_seconds: float) -> None:
    while sio.connected:
        sio.sleep(poll_seconds)
        send_move(sio, session, session.poll())


def run(cfg: BotConfig) -> None:
    player = AiPlayer(cfg.piece, depth=cfg.depth)
    session = GameSession(player, username=cfg.username, idle_seconds=cfg.idle_seconds, debug=cfg.debug)
    sio = build_client(session, debug=cfg.debug)
    print(f"Username {cfg.username} playing {cfg.piece.name} at depth {cfg.depth}")
    sio.connect(_http_url(cfg.server), auth={'username': cfg.username}, transports=['websocket'])
    sio.start_background_task(idle_loop, sio, session, cfg.poll_seconds)
    sio.wait()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Super tic-tac-toe bot for a live Socket.IO game server')
    parser.add_argument('--server', default=None, help='Server URL (env SUPERTTT_SERVER)')
    parser.add_argument('--username', default=None, help='Account to play as (env SUPERTTT_USERNAME)')
    parser.add_argument('--piece', choices=['X', 'O'], default=None, help='Side to play (env SUPERTTT_PIECE)')
    parser.add_argument('--depth', type=int, default=None, help='Search depth in plies (env SUPERTTT_DEPTH)')
    parser.add_argument('--idle', type=float, default=None, help='Seconds without a move before forcing one')
    parser.add_argument('--debug', action='store_true', default=None, help='Verbose diagnostics')
    args = parser.parse_args(argv)
    cfg = load_config(
        server=args.server,
        username=args.username,
        piece=args.piece,
        depth=args.depth,
        idle_seconds=args.idle,
        debug=args.debug,
    )
    run(cfg)


if __name__ == '__main__':
    main()
