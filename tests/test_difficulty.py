"""Tests for the difficulty estimator."""

import pytest

from xocore.board import BoardState, Player
from xocore.difficulty import estimate, near_optimal_count
from xocore.puzzles import Difficulty


def test_empty_board_is_beginner():
    board = BoardState.empty()
    assert near_optimal_count(board) == 9
    assert estimate(board) is Difficulty.BEGINNER


def test_finished_game_is_beginner():
    board = BoardState.from_layout("XXX|OO.|...", Player.O)
    assert near_optimal_count(board) == 0
    assert estimate(board) is Difficulty.BEGINNER


@pytest.mark.parametrize(
    "layout, to_move, count, expected",
    [
        # Only 2 wins; 5 merely draws
        ("XX.|OO.|...", Player.X, 1, Difficulty.INTERMEDIATE),
        # Only 0 wins (by force); five cells filled
        (".O.|OXX|.X.", Player.O, 1, Difficulty.ADVANCED),
        # Blocking on 2 draws, 6 loses; seven cells filled
        ("XX.|OOX|.OX", Player.O, 1, Difficulty.EXPERT),
        # 8 wins at once while 1 and 7 fork, all within tolerance
        ("X.O|OXX|O..", Player.X, 3, Difficulty.INTERMEDIATE),
    ],
)
def test_estimate(layout, to_move, count, expected):
    board = BoardState.from_layout(layout, to_move)
    assert near_optimal_count(board) == count
    assert estimate(board) is expected
