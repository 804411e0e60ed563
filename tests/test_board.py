"""Unit tests for the bitboard position."""

import pytest

from xocore.board import (
    BoardState,
    IllegalMoveError,
    InvalidBoardError,
    Player,
    has_line,
)
from xocore.moves import successors

DRAWN_GAME = [0, 4, 8, 1, 7, 6, 2, 5, 3]


def _reachable_states():
    seen = set()
    stack = [BoardState.empty()]
    while stack:
        state = stack.pop()
        if state in seen:
            continue
        seen.add(state)
        stack.extend(child for _, child in successors(state))
    return seen


def test_empty_board():
    board = BoardState.empty()
    assert board.x_mask == 0 and board.o_mask == 0
    assert board.to_move is Player.X
    assert list(board.legal_moves()) == list(range(9))
    assert board.winner() is None
    assert not board.is_terminal()


def test_layout_maps_cell_zero_to_high_bit():
    board = BoardState.from_layout("XX.|OO.|...", Player.X)
    assert board.x_mask == 0b110_000_000
    assert board.o_mask == 0b000_110_000
    assert board.player_at(0) is Player.X
    assert board.player_at(4) is Player.O
    assert board.player_at(2) is None
    assert board.to_layout() == "XX.|OO.|..."


def test_apply_move_returns_new_value():
    board = BoardState.empty()
    after = board.apply_move(4)
    assert board == BoardState.empty()
    assert after.player_at(4) is Player.X
    assert after.to_move is Player.O
    assert after.last_mover is Player.X


@pytest.mark.parametrize("cell", [-1, 9, 42, True, 1.0])
def test_apply_move_rejects_off_board_cells(cell):
    with pytest.raises(IllegalMoveError):
        BoardState.empty().apply_move(cell)


def test_apply_move_rejects_occupied_cell():
    board = BoardState.empty().apply_move(0)
    with pytest.raises(IllegalMoveError, match="occupied"):
        board.apply_move(0)


def test_apply_move_rejects_finished_game():
    board = BoardState.from_layout("XXX|OO.|...", Player.O)
    with pytest.raises(IllegalMoveError, match="finished"):
        board.apply_move(5)


def test_illegal_move_is_a_value_error():
    assert issubclass(IllegalMoveError, ValueError)


@pytest.mark.parametrize(
    "layout, to_move",
    [
        ("XXX|...|...", Player.X),
        ("XX.|...|...", Player.O),
        ("X..|...|...", Player.X),
        (".O.|...|...", Player.O),
        ("XXX|OOO|...", Player.O),
        # The winner of a finished game cannot be the side to move
        ("OOO|XX.|X..", Player.O),
        ("XXX|OO.|O..", Player.X),
        ("XX.|...", Player.X),
        ("XY.|...|...", Player.X),
    ],
)
def test_unreachable_layouts_are_rejected(layout, to_move):
    with pytest.raises(InvalidBoardError):
        BoardState.from_layout(layout, to_move)


def test_overlapping_masks_are_rejected():
    with pytest.raises(InvalidBoardError):
        BoardState.from_masks(0b100_000_000, 0b100_000_000, Player.X)


def test_masks_wider_than_nine_bits_are_rejected():
    with pytest.raises(InvalidBoardError):
        BoardState.from_masks(0b1_000_000_000, 0, Player.O)


def test_winner_and_winning_line():
    board = BoardState.from_layout("XXX|OO.|...", Player.O)
    assert board.winner() is Player.X
    assert board.winning_line() == (0, 1, 2)
    assert board.is_terminal()
    assert not board.is_draw()
    assert list(board.legal_moves()) == []


def test_diagonal_win_for_o():
    board = BoardState.from_layout("O.X|XO.|X.O", Player.X)
    assert board.winner() is Player.O
    assert board.winning_line() == (0, 4, 8)


def test_full_board_without_line_is_a_draw():
    board = BoardState.from_layout("XOX|XOO|OXX", Player.O)
    assert board.is_draw()
    assert board.winner() is None
    assert board.is_terminal()
    assert list(board.legal_moves()) == []


def test_queries_are_repeatable():
    board = BoardState.from_layout("XO.|.X.|..O", Player.X)
    assert board.winner() == board.winner()
    assert list(board.legal_moves()) == list(board.legal_moves())


def test_replay_matches_direct_masks():
    board = BoardState.empty()
    for cell in DRAWN_GAME:
        board = board.apply_move(cell)

    x_mask = o_mask = 0
    for ply, cell in enumerate(DRAWN_GAME):
        if ply % 2 == 0:
            x_mask |= 1 << (8 - cell)
        else:
            o_mask |= 1 << (8 - cell)
    assert board == BoardState.from_masks(x_mask, o_mask, Player.O)
    assert board.is_draw()


def test_invariants_hold_for_every_reachable_state():
    states = _reachable_states()
    # 5478 legal positions are reachable from the empty board
    assert len(states) == 5478
    for state in states:
        x_count = bin(state.x_mask).count("1")
        o_count = bin(state.o_mask).count("1")
        assert state.x_mask & state.o_mask == 0
        assert x_count - o_count in (0, 1)
        assert not (has_line(state.x_mask) and has_line(state.o_mask))


def test_string_rendering():
    board = BoardState.from_layout("X..|.O.|...", Player.X)
    assert str(board).splitlines()[0] == "X | . | ."
