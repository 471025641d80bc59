"""Tests for the Tic-Tac-Toe minimax opponent."""

import random
from collections import Counter

import pytest

from gamehub.board import DRAW, empty_cells, evaluate, new_board, other_mark
from gamehub.engine import Difficulty, choose_move, minimax, next_difficulty


def _board(text: str):
    return [" " if c == "_" else c for c in text]


@pytest.fixture(scope="module")
def opening():
    # Full search from the empty board is the slowest call; run it once.
    return choose_move(new_board(), "X", "O", Difficulty.HARD)


def test_hard_answers_corner_with_center():
    board = _board("X________")
    moves = {choose_move(board, "O", "X", Difficulty.HARD) for _ in range(2)}
    assert moves == {4}


def test_hard_takes_immediate_win():
    board = _board("OO_XX____")
    assert choose_move(board, "O", "X", Difficulty.HARD) == 2


def test_hard_blocks_opponent():
    board = _board("XX__O____")
    assert choose_move(board, "O", "X", Difficulty.HARD) == 2


def test_ties_go_to_lowest_index():
    # Cells 2 and 6 both win at once; the lower index is kept.
    board = _board("OO_OXX_X_")
    assert choose_move(board, "O", "X", Difficulty.HARD) == 2


def test_search_leaves_caller_board_untouched():
    board = _board("X___O___X")
    snapshot = list(board)
    choose_move(board, "O", "X", Difficulty.HARD)
    assert board == snapshot


def test_full_board_returns_none():
    board = _board("XOXOXOOXO")
    for difficulty in Difficulty:
        assert choose_move(board, "O", "X", difficulty) is None


def test_same_marks_rejected():
    with pytest.raises(ValueError):
        choose_move(new_board(), "X", "X", Difficulty.HARD)


def test_minimax_scores_terminal_boards():
    assert minimax(_board("OOO_XX_X_"), "X", "O", "X", 3) == 7
    assert minimax(_board("XXX_OO_O_"), "O", "O", "X", 2) == -8
    assert minimax(_board("XOXOXOOXO"), "X", "O", "X", 5) == 0


def test_hard_always_picks_empty_cell():
    rng = random.Random(11)
    for _ in range(30):
        board = new_board()
        mark = "X"
        for _ in range(rng.randint(3, 8)):
            board[rng.choice(empty_cells(board))] = mark
            mark = other_mark(mark)
            if evaluate(board).finished:
                break
        if evaluate(board).finished:
            continue
        move = choose_move(board, mark, other_mark(mark), Difficulty.HARD)
        assert move in empty_cells(board)


def test_hard_self_play_draws(opening):
    assert opening == 0
    board = new_board()
    board[opening] = "X"
    mark = "O"
    while not evaluate(board).finished:
        move = choose_move(board, mark, other_mark(mark), Difficulty.HARD)
        board[move] = mark
        mark = other_mark(mark)
    assert evaluate(board).status == DRAW


def _human_can_win(board, bot, to_move, cache):
    """Try every human reply against Hard; True if any line of play loses."""
    result = evaluate(board)
    if result.finished:
        return result.winner == other_mark(bot)
    if to_move == bot:
        key = tuple(board)
        if key not in cache:
            cache[key] = choose_move(board, bot, other_mark(bot), Difficulty.HARD)
        replies = [cache[key]]
    else:
        replies = empty_cells(board)
    for cell in replies:
        child = list(board)
        child[cell] = to_move
        if _human_can_win(child, bot, other_mark(to_move), cache):
            return True
    return False


def test_hard_never_loses_as_second_player():
    assert not _human_can_win(new_board(), "O", "X", {})


def test_hard_never_loses_as_first_player(opening):
    board = new_board()
    board[opening] = "X"
    assert not _human_can_win(board, "X", "O", {})


def test_easy_covers_every_empty_cell():
    board = _board("XOXOX_OX_")
    rng = random.Random(7)
    counts = Counter(
        choose_move(board, "O", "X", Difficulty.EASY, rng=rng) for _ in range(1000)
    )
    assert set(counts) == {5, 8}
    assert 400 < counts[5] < 600


def test_medium_mostly_matches_hard():
    # O must block at 2; every other cell loses at once.
    board = _board("XX__OX__O")
    assert choose_move(board, "O", "X", Difficulty.HARD) == 2

    rng = random.Random(99)
    picks = [choose_move(board, "O", "X", Difficulty.MEDIUM, rng=rng) for _ in range(2000)]
    assert all(p in empty_cells(board) for p in picks)
    blunders = sum(1 for p in picks if p != 2)
    # 15% random play over 4 cells: about 11% of picks miss the block.
    assert 120 < blunders < 350


def test_difficulty_cycle():
    assert next_difficulty(Difficulty.HARD) is Difficulty.MEDIUM
    assert next_difficulty(Difficulty.MEDIUM) is Difficulty.EASY
    assert next_difficulty(Difficulty.EASY) is Difficulty.HARD
    assert Difficulty("Medium") is Difficulty.MEDIUM
