"""Tests for the Tic-Tac-Toe minimax AI."""

from tictactoe.ai import MinimaxAI, best_move, score
from tictactoe.rules import EMPTY, empty_cells, is_full, other_mark, winner

O, X, _ = "O", "X", EMPTY


def test_center_reply_to_corner_opening():
    board = [O, _, _, _, _, _, _, _, _]
    assert best_move(board, X, O) == 4


def test_corner_reply_to_center_opening():
    # All corners draw; the lowest index wins the tie
    board = [_, _, _, _, O, _, _, _, _]
    assert best_move(board, X, O) == 0


def test_takes_immediate_win():
    board = [X, X, _, O, O, _, _, _, _]
    assert best_move(board, X, O) == 2


def test_blocks_opponent_win():
    board = [O, O, _, _, X, _, _, _, _]
    assert best_move(board, X, O) == 2


def test_full_board_has_no_move():
    board = [O, X, O, O, X, X, X, O, O]
    assert best_move(board, X, O) is None


def test_does_not_mutate_board():
    board = [O, _, _, _, _, _, _, _, _]
    before = list(board)
    best_move(board, X, O)
    assert board == before


def test_score_prefers_faster_wins():
    # X already has a line: depth 0 scores 10, deeper scores less
    board = [X, X, X, O, O, _, _, _, _]
    assert score(board, 0, False, X, O) == 10
    assert score(board, 3, False, X, O) == 7
    lost = [O, O, O, X, X, _, _, _, _]
    assert score(lost, 2, True, X, O) == -8


def test_ai_object_uses_its_marks():
    ai = MinimaxAI()
    assert ai.player == X
    assert ai.choose([O, _, _, _, _, _, _, _, _]) == 4


def _never_loses(board, to_move):
    found = winner(board)
    if found is not None:
        return found == X
    if is_full(board):
        return True
    if to_move == X:
        move = best_move(board, X, O)
        board[move] = X
        ok = _never_loses(board, O)
        board[move] = _
        return ok
    for i in empty_cells(board):
        board[i] = O
        ok = _never_loses(board, X)
        board[i] = _
        if not ok:
            return False
    return True


def test_ai_never_loses_as_second_player():
    assert _never_loses([_] * 9, O)


def test_self_play_is_a_draw():
    board = [_] * 9
    mark = O
    while winner(board) is None and not is_full(board):
        board[best_move(board, mark, other_mark(mark))] = mark
        mark = other_mark(mark)
    assert winner(board) is None
