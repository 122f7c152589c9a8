"""Tic-Tac-Toe package exposing game rules, the minimax AI, and the web application."""

from .ai import MinimaxAI, best_move
from .game import GameState, IllegalMove, Outcome, new_game
from .ui import app

__all__ = ["GameState", "IllegalMove", "MinimaxAI", "Outcome", "app", "best_move", "new_game"]
