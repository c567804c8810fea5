from game import GameState, Piece, SubBoard, new_game

X, O, E = Piece.X, Piece.O, Piece.EMPTY

# A full sub-board with no completed line.
DRAW_CELLS = [X, O, X, X, O, O, O, X, X]


def make_state(boards=None, next_piece=Piece.X, game_id=0, winner=None, winning_line=None):
    """Builds a GameState from {board_id: 9 cells}; unspecified boards are empty."""
    boards = boards or {}
    subs = []
    for i in range(9):
        if i in boards:
            subs.append(SubBoard.from_cells(i, boards[i]))
        else:
            subs.append(SubBoard.empty(i))
    return GameState(id=game_id, boards=tuple(subs), next_piece=next_piece,
                     winner=winner, winning_line=winning_line)


def fresh():
    return new_game()
