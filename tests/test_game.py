"""Unit tests for the Tic-Tac-Toe session."""

import pytest

from gamehub.engine import Difficulty
from gamehub.game import TicTacToeGame


def _play_all(game, cells):
    for cell in cells:
        game.play(cell)


def test_turns_alternate_and_marks_land():
    game = TicTacToeGame(vs_bot=False)
    game.play(4)
    game.play(0)
    assert game.board[4] == "X"
    assert game.board[0] == "O"
    assert game.turn == "X"


def test_occupied_cell_rejected():
    game = TicTacToeGame(vs_bot=False)
    game.play(4)
    with pytest.raises(ValueError):
        game.play(4)
    with pytest.raises(ValueError):
        game.play(9)


def test_win_updates_tally_once_and_blocks_moves():
    game = TicTacToeGame(vs_bot=False)
    _play_all(game, [0, 3, 1, 4, 2])
    assert game.result.winner == "X"
    assert game.result.cells == (0, 1, 2)
    assert game.scores() == {"X": 1, "O": 0, "draw": 0}
    with pytest.raises(ValueError):
        game.play(8)
    assert game.scores() == {"X": 1, "O": 0, "draw": 0}


def test_draw_tally_and_resets():
    game = TicTacToeGame(vs_bot=False)
    _play_all(game, [0, 1, 2, 4, 3, 5, 7, 6, 8])
    assert game.result.status == "draw"
    assert game.draws == 1

    game.reset_board()
    assert game.board == [" "] * 9
    assert game.turn == "X"
    assert game.draws == 1

    game.reset_all()
    assert game.scores() == {"X": 0, "O": 0, "draw": 0}


def test_bot_answers_with_current_difficulty():
    game = TicTacToeGame()
    game.play(0)
    assert game.bot_should_move()
    move = game.play_bot_move()
    assert move == 4
    assert game.board[4] == "O"
    assert game.turn == "X"
    assert not game.bot_should_move()
    assert game.play_bot_move() is None


def test_bot_idle_when_disabled():
    game = TicTacToeGame(vs_bot=False)
    game.play(0)
    assert not game.bot_should_move()
    game.set_vs_bot(True)
    assert game.bot_should_move()


def test_difficulty_cycles_and_sets():
    game = TicTacToeGame()
    assert game.difficulty is Difficulty.HARD
    assert game.cycle_difficulty() is Difficulty.MEDIUM
    assert game.cycle_difficulty() is Difficulty.EASY
    assert game.cycle_difficulty() is Difficulty.HARD
    assert game.set_difficulty("Easy") is Difficulty.EASY
