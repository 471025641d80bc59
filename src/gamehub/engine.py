"""Minimax opponent for Tic-Tac-Toe with difficulty-scaled random play."""

from __future__ import annotations

from enum import Enum
import logging
import math
import random
from typing import List, Optional, Sequence

from .board import EMPTY, Mark, empty_cells, evaluate, other_mark

logger = logging.getLogger(__name__)

# Chance that a Medium bot ignores the search and plays a random cell.
MEDIUM_RANDOM_RATE = 0.15


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


DIFFICULTY_CYCLE = {
    Difficulty.HARD: Difficulty.MEDIUM,
    Difficulty.MEDIUM: Difficulty.EASY,
    Difficulty.EASY: Difficulty.HARD,
}


def next_difficulty(difficulty: Difficulty) -> Difficulty:
    return DIFFICULTY_CYCLE[Difficulty(difficulty)]


def choose_move(
    board: Sequence[str],
    bot: Mark,
    human: Mark,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> Optional[int]:
    """Pick the cell the bot should play, or ``None`` if the board is full.

    Easy plays a uniformly random empty cell. Medium does the same with
    probability ``MEDIUM_RANDOM_RATE`` and otherwise searches like Hard. Hard
    runs an exhaustive minimax and returns the lowest-indexed best cell.
    """
    if bot == human:
        raise ValueError("Bot and human must use different marks")

    rng = rng or random
    moves = empty_cells(board)
    if not moves:
        return None

    difficulty = Difficulty(difficulty)
    if difficulty is Difficulty.EASY:
        move = rng.choice(moves)
        logger.debug("easy bot %s picks random cell %d", bot, move)
        return move
    if difficulty is Difficulty.MEDIUM and rng.random() < MEDIUM_RANDOM_RATE:
        move = rng.choice(moves)
        logger.debug("medium bot %s slips, random cell %d", bot, move)
        return move

    # Work on a private copy; sibling branches undo their placements.
    work: List[str] = list(board)
    best_score = -math.inf
    best_move = moves[0]
    for i in moves:
        work[i] = bot
        score = minimax(work, other_mark(bot), bot, human, 0)
        work[i] = EMPTY
        if score > best_score:
            best_score, best_move = score, i

    logger.debug(
        "%s bot %s searched cell %d (score %s)",
        difficulty.value.lower(),
        bot,
        best_move,
        best_score,
    )
    return best_move


def minimax(board: List[str], current: Mark, bot: Mark, human: Mark, depth: int) -> int:
    """Score ``board`` for the bot with ``current`` to move.

    Wins score ``10 - depth`` and losses ``depth - 10`` so the bot prefers quick
    wins and slow losses. ``board`` is restored before returning.
    """
    result = evaluate(board)
    if result.finished:
        if result.winner == bot:
            return 10 - depth
        if result.winner == human:
            return depth - 10
        return 0

    maximizing = current == bot
    value = -math.inf if maximizing else math.inf
    for i in empty_cells(board):
        board[i] = current
        score = minimax(board, other_mark(current), bot, human, depth + 1)
        board[i] = EMPTY
        if maximizing:
            value = max(value, score)
        else:
            value = min(value, score)
    return int(value)
