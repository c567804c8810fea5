"""
SuperTTT core Python package.

Pure-logic pieces of the super tic-tac-toe engine, kept free of I/O so they
can be tested in isolation.
Modules:
- board.py: Piece, SubBoard, outcome scoring
- state.py: GameState and snapshot validation
- moves.py: move generation and the state transition
- search.py: heuristic, minimax and best-move selection
- ai.py: AiPlayer, the per-session decision entry point
- wire.py: JSON codec for the game server's snapshots
- session.py, bot.py: live-server event handling and Socket.IO transport
"""
