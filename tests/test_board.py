"""Unit tests for Tic-Tac-Toe board evaluation."""

from gamehub.board import (
    DRAW,
    IN_PROGRESS,
    WIN,
    WINNING_LINES,
    empty_cells,
    evaluate,
    new_board,
    other_mark,
)


def _board(text: str):
    return [" " if c == "_" else c for c in text]


def test_row_win_reports_mark_and_line():
    result = evaluate(_board("XXXOO____"))
    assert result.status == WIN
    assert result.winner == "X"
    assert result.line == 0
    assert result.cells == (0, 1, 2)


def test_full_board_without_line_is_draw():
    result = evaluate(_board("XOXOXOOXO"))
    assert result.status == DRAW
    assert result.winner is None
    assert result.cells is None
    assert result.finished


def test_empty_board_in_progress():
    result = evaluate(new_board())
    assert result.status == IN_PROGRESS
    assert not result.finished


def test_column_and_diagonal_lines():
    assert evaluate(_board("O__O__O__")).line == 3
    assert evaluate(_board("__X_X_X__")).line == 7


def test_first_line_in_order_wins():
    # Both the top row and the left column are complete.
    result = evaluate(_board("XXXX__X__"))
    assert result.line == 0


def test_full_board_with_line_is_win_not_draw():
    result = evaluate(_board("XOXOXOOXX"))
    assert result.status == WIN
    assert result.winner == "X"
    assert result.cells == WINNING_LINES[6]


def test_helpers():
    assert empty_cells(_board("X_O_X_O__")) == [1, 3, 5, 7, 8]
    assert other_mark("X") == "O"
    assert other_mark("O") == "X"
