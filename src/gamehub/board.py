"""Board representation and terminal-state evaluation for 3x3 Tic-Tac-Toe."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

Mark = str  # "X" or "O"
Board = List[str]

EMPTY = " "
MARKS: Tuple[Mark, Mark] = ("X", "O")

IN_PROGRESS = "in_progress"
WIN = "win"
DRAW = "draw"

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


@dataclass(frozen=True)
class TerminalResult:
    status: str = IN_PROGRESS
    winner: Optional[Mark] = None
    line: Optional[int] = None

    @property
    def finished(self) -> bool:
        return self.status != IN_PROGRESS

    @property
    def cells(self) -> Optional[Tuple[int, int, int]]:
        """The winning triple of cell indices, for drawing the strike-through."""
        if self.line is None:
            return None
        return WINNING_LINES[self.line]


def new_board() -> Board:
    return [EMPTY] * 9


def other_mark(mark: Mark) -> Mark:
    return "O" if mark == "X" else "X"


def empty_cells(board: Sequence[str]) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


def evaluate(board: Sequence[str]) -> TerminalResult:
    """Classify a board as a win (with its line), a draw, or still in progress.

    Lines are checked in ``WINNING_LINES`` order and the first complete one is
    reported.
    """
    for index, (a, b, c) in enumerate(WINNING_LINES):
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return TerminalResult(status=WIN, winner=v, line=index)
    if all(c != EMPTY for c in board):
        return TerminalResult(status=DRAW)
    return TerminalResult()
