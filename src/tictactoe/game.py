"""Turn controller: immutable game state and the moves that advance it."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple
import logging

from .ai import MinimaxAI
from .rules import (
    BOARD_SIZE,
    EMPTY,
    MARK_O,
    MARK_X,
    MARKS,
    Mark,
    check_board,
    is_full,
    is_legal_move,
    other_mark,
    winner,
)

logger = logging.getLogger(__name__)

FIRST_MARK: Mark = MARK_O
AI_MARK: Mark = MARK_X


class IllegalMove(ValueError):
    """A move the current game state does not accept."""


class Status(str, Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    status: Status = Status.IN_PROGRESS
    winner: Optional[Mark] = None

    @classmethod
    def won(cls, mark: Mark) -> "Outcome":
        assert mark in MARKS, f"unknown mark {mark!r}"
        return cls(Status.WON, mark)

    @property
    def is_terminal(self) -> bool:
        return self.status is not Status.IN_PROGRESS


IN_PROGRESS = Outcome()
DRAW = Outcome(Status.DRAW)


@dataclass(frozen=True)
class GameState:
    board: Tuple[str, ...] = (EMPTY,) * BOARD_SIZE
    active_mark: Mark = FIRST_MARK
    move_count: int = 0
    outcome: Outcome = IN_PROGRESS
    ai_enabled: bool = False
    ai_mark: Mark = AI_MARK
    ai_pending: bool = False
    last_move: Optional[int] = None

    def __post_init__(self) -> None:
        check_board(self.board)
        assert self.active_mark in MARKS, f"unknown mark {self.active_mark!r}"
        assert self.move_count == sum(c != EMPTY for c in self.board)


# ---- public API used by the web layer ----


def new_game(ai_enabled: bool = False) -> GameState:
    return GameState(ai_enabled=ai_enabled)


def reset(state: Optional[GameState] = None) -> GameState:
    """Fresh board; the AI mode of ``state`` is kept."""
    return new_game(ai_enabled=state.ai_enabled if state is not None else False)


def set_ai_mode(enabled: bool) -> GameState:
    # Toggling the mode always restarts the board
    return new_game(ai_enabled=enabled)


def outcome(state: GameState) -> Outcome:
    return state.outcome


def pending_ai_turn(state: GameState) -> bool:
    return state.ai_pending


def apply_move(state: GameState, index: int, by: Mark) -> GameState:
    """Place ``by`` at ``index`` and advance the turn.

    Raises IllegalMove, leaving ``state`` as it was, when the game is over,
    ``by`` is not on move, the cell is taken or out of range, or the AI still
    owes its move.
    """
    if state.ai_pending:
        raise IllegalMove("AI is completing its move")
    return _place(state, index, by)


def apply_human_move(state: GameState, index: int) -> GameState:
    return apply_move(state, index, state.active_mark)


def resolve_ai_turn(state: GameState, ai: Optional[MinimaxAI] = None) -> GameState:
    """Play the pending AI move and clear the pending flag."""
    if not state.ai_pending:
        raise IllegalMove("No AI move is pending")
    if state.outcome.is_terminal:
        raise IllegalMove("Game already finished")

    ai = ai or MinimaxAI(player=state.ai_mark, opponent=other_mark(state.ai_mark))
    index = ai.choose(state.board)
    if index is None:
        return replace(state, ai_pending=False)

    logger.debug("AI %s plays cell %d", state.ai_mark, index)
    return replace(_place(state, index, state.ai_mark), ai_pending=False)


# ---- helpers ----


def _place(state: GameState, index: int, by: Mark) -> GameState:
    if state.outcome.is_terminal:
        raise IllegalMove("Game already finished")
    if by != state.active_mark:
        raise IllegalMove(f"It is not {by}'s turn")
    if not is_legal_move(state.board, index):
        if 0 <= index < BOARD_SIZE:
            raise IllegalMove(f"Cell {index} is already occupied")
        raise IllegalMove(f"Cell {index} is out of range")

    board = list(state.board)
    board[index] = by
    placed = replace(
        state, board=tuple(board), move_count=state.move_count + 1, last_move=index
    )

    found = winner(placed.board)
    if found is not None:
        return replace(placed, outcome=Outcome.won(found))
    if is_full(placed.board):
        return replace(placed, outcome=DRAW)

    next_mark = other_mark(by)
    return replace(
        placed,
        active_mark=next_mark,
        ai_pending=state.ai_enabled and next_mark == state.ai_mark,
    )
