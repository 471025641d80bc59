"""GameHub package exposing the Tic-Tac-Toe engine, Memory Match, and the web application."""

from .board import evaluate
from .engine import Difficulty, choose_move
from .game import TicTacToeGame
from .memory import MemoryGame
from .ui import app

__all__ = ["Difficulty", "MemoryGame", "TicTacToeGame", "app", "choose_move", "evaluate"]
