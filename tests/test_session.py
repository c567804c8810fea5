import random
import unittest
from unittest.mock import patch

from game import AiPlayer, InvalidMove, InvalidState, Piece, new_game
from superttt_core.bot import _http_url, build_client, send_move
from superttt_core.session import GameSession
from superttt_core.wire import state_to_json


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def _make_session(piece=Piece.X, strict=False):
    clock = FakeClock()
    ai = AiPlayer(piece, depth=1, rng=random.Random(0))
    session = GameSession(ai, username="bot", idle_seconds=6.0, clock=clock, strict=strict)
    session.on_history([state_to_json(new_game(game_id=1)), state_to_json(new_game(game_id=7))])
    return session, clock


class TestGameSession(unittest.TestCase):
    def test_given_history_when_received_then_last_snapshot_adopted(self):
        session, _ = _make_session()
        self.assertEqual(session.snapshot().id, 7)
        session.on_history([])
        self.assertEqual(session.snapshot().id, 7)

    def test_given_opponent_update_when_applied_then_reply_chosen_but_not_applied(self):
        session, _ = _make_session(Piece.X)
        reply = session.on_update(7, 4, 4, 2, "human")
        state = session.snapshot()
        self.assertEqual(state.boards[4].cells[4], Piece.O)
        self.assertEqual(state.next_piece, Piece.X)
        self.assertIsNotNone(reply)
        self.assertNotEqual(reply, (4, 4))
        # Our own move only lands once the server echoes it.
        b, s = reply
        self.assertEqual(state.boards[b].cells[s], Piece.EMPTY)
        self.assertIsNone(session.on_update(7, b, s, 1, "bot"))
        self.assertEqual(session.snapshot().boards[b].cells[s], Piece.X)

    def test_given_update_for_other_game_when_received_then_ignored(self):
        session, _ = _make_session()
        self.assertIsNone(session.on_update(99, 0, 0, 2, "human"))
        self.assertEqual(session.snapshot(), new_game(game_id=7))

    def test_given_occupied_square_when_update_arrives_then_rejected(self):
        session, _ = _make_session()
        session.on_update(7, 0, 0, 1, "bot")
        before = session.snapshot()
        self.assertIsNone(session.on_update(7, 0, 0, 2, "human"))
        self.assertEqual(session.snapshot(), before)

        strict, _ = _make_session(strict=True)
        strict.on_update(7, 0, 0, 1, "bot")
        with self.assertRaises(InvalidMove):
            strict.on_update(7, 0, 0, 2, "human")

    def test_given_quiet_game_when_polled_then_move_forced_after_threshold(self):
        session, clock = _make_session()
        self.assertFalse(session.idle_due())
        self.assertIsNone(session.poll())
        clock.now += 6.5
        self.assertTrue(session.idle_due())
        move = session.poll()
        self.assertIsNotNone(move)
        # Any confirmed move resets the idle clock.
        session.on_update(7, move[0], move[1], 1, "bot")
        self.assertFalse(session.idle_due())

    def test_given_end_events_when_received_then_outcomes_recorded(self):
        session, clock = _make_session()
        # A draw reported for a board whose marks are not all known yet is held back.
        session.on_end(7, 3, 0, None, None)
        self.assertIsNone(session.snapshot().boards[3].winner)
        session.on_end(7, None, 2, [2, 4, 6], "human")
        state = session.snapshot()
        self.assertEqual(state.winner, Piece.O)
        self.assertEqual(state.winning_line, (2, 4, 6))
        clock.now += 60
        self.assertFalse(session.idle_due())
        self.assertIsNone(session.on_update(7, 0, 0, 2, "human"))

    def test_given_board_end_before_winning_update_when_update_arrives_then_mark_and_outcome_kept(self):
        session, _ = _make_session(Piece.O)
        session.on_update(7, 0, 0, 1, "human")
        session.on_update(7, 0, 1, 1, "human")
        session.on_end(7, 0, 1, [0, 1, 2], "human")
        self.assertIsNone(session.snapshot().boards[0].winner)

        reply = session.on_update(7, 0, 2, 1, "human")
        state = session.snapshot()
        self.assertEqual(state.boards[0].cells[2], Piece.X)
        self.assertEqual(state.boards[0].winner, Piece.X)
        self.assertEqual(state.boards[0].winning_line, (0, 1, 2))
        self.assertIsNotNone(reply)
        self.assertNotEqual(reply[0], 0)
        self.assertIsNotNone(session.player.decide(state))

    def test_given_board_end_after_winning_update_when_received_then_recorded(self):
        session, _ = _make_session(Piece.O)
        for square in (3, 4, 5):
            session.on_update(7, 8, square, 1, "human")
        session.on_end(7, 8, 1, [3, 4, 5], "human")
        board = session.snapshot().boards[8]
        self.assertEqual((board.winner, board.winning_line), (Piece.X, (3, 4, 5)))

    def test_given_bad_piece_code_when_update_arrives_then_rejected(self):
        session, _ = _make_session()
        self.assertIsNone(session.on_update(7, 0, 0, 9, "human"))
        self.assertEqual(session.snapshot(), new_game(game_id=7))

        strict, _ = _make_session(strict=True)
        with self.assertRaises(InvalidState):
            strict.on_update(7, 0, 0, 9, "human")

    def test_given_slow_search_when_polled_meanwhile_then_no_second_move(self):
        clock = FakeClock()
        seen = []

        class SlowPlayer:
            piece = Piece.X

            def decide(self, state):
                # The search outlasts the idle threshold.
                clock.now += 20
                seen.append(session.idle_due())
                seen.append(session.poll())
                return (0, 0)

        session = GameSession(SlowPlayer(), idle_seconds=6.0, clock=clock)
        session.on_history([state_to_json(new_game(game_id=7))])
        self.assertEqual(session.on_update(7, 4, 4, 2, "human"), (0, 0))
        self.assertEqual(seen, [False, None])
        # The idle window restarts when the search finishes.
        self.assertFalse(session.idle_due())
        clock.now += 6.5
        self.assertTrue(session.idle_due())

    def test_given_mismatched_identity_when_reported_then_piece_kept(self):
        session, _ = _make_session(Piece.X)
        session.on_player_information("uuid-1", "bot", 2)
        self.assertEqual(session.piece, Piece.X)


class TestSocketBot(unittest.TestCase):
    def test_given_ws_urls_when_converted_then_http_schemes(self):
        self.assertEqual(_http_url("wss://staging.tictacyo.live"), "https://staging.tictacyo.live")
        self.assertEqual(_http_url("ws://localhost:3000"), "http://localhost:3000")
        self.assertEqual(_http_url("http://localhost:3000"), "http://localhost:3000")

    def test_given_opponent_update_event_when_handled_then_client_update_emitted(self):
        session, _ = _make_session(Piece.O)
        sio = build_client(session)
        handlers = sio.handlers["/"]
        for event in ("playerInformation", "history", "update", "end", "playerList", "emote"):
            self.assertIn(event, handlers)
        with patch.object(sio, "emit") as emit:
            handlers["update"](7, 0, 0, 1, "human")
            handlers["update"](7, 1, 1, 2, "bot")
        self.assertEqual(emit.call_count, 1)
        name, args = emit.call_args[0]
        self.assertEqual(name, "clientUpdate")
        game_id, board_id, square_id, piece = args
        self.assertEqual((game_id, piece), (7, 2))
        self.assertNotEqual((board_id, square_id), (0, 0))

    def test_given_no_move_when_sending_then_nothing_emitted(self):
        session, _ = _make_session()
        sio = build_client(session)
        with patch.object(sio, "emit") as emit:
            self.assertFalse(send_move(sio, session, None))
        emit.assert_not_called()


if __name__ == '__main__':
    unittest.main(verbosity=2)
