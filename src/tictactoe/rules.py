"""Board rules for classic 3x3 Tic-Tac-Toe: wins, draws and move legality."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

Mark = str  # "O" or "X"
Board = Sequence[str]

EMPTY = ""
MARK_O: Mark = "O"  # moves first
MARK_X: Mark = "X"  # moves second, played by the AI
MARKS: Tuple[Mark, Mark] = (MARK_O, MARK_X)

BOARD_SIZE = 9

WIN_PATTERNS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (0, 3, 6),
    (0, 4, 8),
    (1, 4, 7),
    (2, 5, 8),
    (2, 4, 6),
    (3, 4, 5),
    (6, 7, 8),
)


def check_board(board: Board) -> None:
    """Fail fast on boards no legal game can produce."""
    assert len(board) == BOARD_SIZE, f"board must have 9 cells, got {len(board)}"
    for cell in board:
        assert cell == EMPTY or cell in MARKS, f"unknown cell value {cell!r}"


def other_mark(mark: Mark) -> Mark:
    assert mark in MARKS, f"unknown mark {mark!r}"
    return MARK_X if mark == MARK_O else MARK_O


def winner(board: Board) -> Optional[Mark]:
    assert len(board) == BOARD_SIZE, f"board must have 9 cells, got {len(board)}"
    # First matching pattern in table order wins
    for a, b, c in WIN_PATTERNS:
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return v
    return None


def is_full(board: Board) -> bool:
    assert len(board) == BOARD_SIZE, f"board must have 9 cells, got {len(board)}"
    return all(c != EMPTY for c in board)


def is_legal_move(board: Board, index: int) -> bool:
    assert len(board) == BOARD_SIZE, f"board must have 9 cells, got {len(board)}"
    return 0 <= index < BOARD_SIZE and board[index] == EMPTY


def empty_cells(board: Board) -> List[int]:
    """Indices of empty cells in ascending order."""
    return [i for i, c in enumerate(board) if c == EMPTY]
