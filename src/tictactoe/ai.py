"""Exhaustive minimax search for the Tic-Tac-Toe AI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import math

from .rules import EMPTY, MARK_O, MARK_X, Board, Mark, check_board, is_full, winner

WIN_SCORE = 10


def _score(
    cells: List[str], depth: int, maximizing: bool, ai_mark: Mark, opponent_mark: Mark
) -> int:
    found = winner(cells)
    if found == ai_mark:
        return WIN_SCORE - depth  # faster wins score higher
    if found == opponent_mark:
        return depth - WIN_SCORE  # slower losses score higher
    if is_full(cells):
        return 0

    mark = ai_mark if maximizing else opponent_mark
    best = -math.inf if maximizing else math.inf
    for i in range(len(cells)):
        if cells[i] != EMPTY:
            continue
        cells[i] = mark
        value = _score(cells, depth + 1, not maximizing, ai_mark, opponent_mark)
        cells[i] = EMPTY
        best = max(best, value) if maximizing else min(best, value)
    return int(best)


def score(
    board: Board, depth: int, maximizing: bool, ai_mark: Mark, opponent_mark: Mark
) -> int:
    """Minimax value of ``board`` from ``ai_mark``'s point of view.

    ``depth`` counts plies since the AI's candidate move; ``maximizing`` says
    whether ``ai_mark`` is the side to move.
    """
    check_board(board)
    return _score(list(board), depth, maximizing, ai_mark, opponent_mark)


def best_move(board: Board, ai_mark: Mark, opponent_mark: Mark) -> Optional[int]:
    """Return the optimal cell for ``ai_mark``, or None on a full board.

    Candidates are tried in ascending index order and only a strictly better
    score replaces the incumbent, so the lowest index wins ties.
    """
    check_board(board)
    assert ai_mark != opponent_mark, "both sides cannot share a mark"

    cells = list(board)
    best_index: Optional[int] = None
    best_score = -math.inf
    for i in range(len(cells)):
        if cells[i] != EMPTY:
            continue
        cells[i] = ai_mark
        value = _score(cells, 0, False, ai_mark, opponent_mark)
        cells[i] = EMPTY
        if value > best_score:
            best_score, best_index = value, i
    return best_index


@dataclass
class MinimaxAI:
    """AI player that always picks the minimax-optimal cell.

    Public surface:
      - MinimaxAI(player="X", opponent="O")
      - choose(board) -> cell index, or None when the board is full
    """

    player: Mark = MARK_X
    opponent: Mark = MARK_O

    def choose(self, board: Board) -> Optional[int]:
        return best_move(board, self.player, self.opponent)
