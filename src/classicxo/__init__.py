"""ClassicXO package exposing game rules, the minimax AI, and the web application."""

from .ai import MinimaxAI, choose_move
from .game import TicTacToeGame, check_outcome, evaluate
from .ui import app

__all__ = [
    "MinimaxAI",
    "TicTacToeGame",
    "app",
    "check_outcome",
    "choose_move",
    "evaluate",
]
