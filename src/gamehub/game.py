"""Tic-Tac-Toe session state: board, turn, running score and bot settings."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import random
from typing import Dict, Optional

from .board import (
    DRAW,
    EMPTY,
    Board,
    Mark,
    TerminalResult,
    evaluate,
    new_board,
    other_mark,
)
from .engine import Difficulty, choose_move, next_difficulty

logger = logging.getLogger(__name__)


@dataclass
class TicTacToeGame:
    board: Board = field(default_factory=new_board)
    turn: Mark = "X"
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0
    vs_bot: bool = True
    difficulty: Difficulty = Difficulty.HARD
    human_mark: Mark = "X"
    bot_mark: Mark = "O"

    # ---- API used by the web layer ----

    @property
    def result(self) -> TerminalResult:
        return evaluate(self.board)

    def scores(self) -> Dict[str, int]:
        return {"X": self.x_wins, "O": self.o_wins, "draw": self.draws}

    def play(self, index: int) -> None:
        """Place the mark of the player to move and hand the turn over."""
        if self.result.finished:
            raise ValueError("Game already finished")
        if not 0 <= index < 9:
            raise ValueError("Cell index must be between 0 and 8")
        if self.board[index] != EMPTY:
            raise ValueError("Cell already occupied")

        self.board[index] = self.turn
        self.turn = other_mark(self.turn)
        self._record_result()

    def bot_should_move(self) -> bool:
        return self.vs_bot and not self.result.finished and self.turn == self.bot_mark

    def play_bot_move(self, rng: Optional[random.Random] = None) -> Optional[int]:
        """Let the bot answer with the session's current difficulty."""
        if not self.bot_should_move():
            return None
        move = choose_move(
            self.board, self.bot_mark, self.human_mark, self.difficulty, rng=rng
        )
        if move is not None:
            self.play(move)
        return move

    def reset_board(self) -> None:
        self.board = new_board()
        self.turn = "X"

    def reset_all(self) -> None:
        self.reset_board()
        self.x_wins = self.o_wins = self.draws = 0

    def set_difficulty(self, difficulty: Difficulty) -> Difficulty:
        self.difficulty = Difficulty(difficulty)
        return self.difficulty

    def cycle_difficulty(self) -> Difficulty:
        self.difficulty = next_difficulty(self.difficulty)
        return self.difficulty

    def set_vs_bot(self, enabled: bool) -> None:
        self.vs_bot = bool(enabled)

    # ---- helpers ----

    def _record_result(self) -> None:
        result = self.result
        if not result.finished:
            return
        if result.status == DRAW:
            self.draws += 1
        elif result.winner == "X":
            self.x_wins += 1
        else:
            self.o_wins += 1
        logger.info("game over: %s", result.winner or "draw")
