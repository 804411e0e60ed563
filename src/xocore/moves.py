"""Move enumeration and pure transitions consumed by the search layer."""

from __future__ import annotations

from typing import Iterable, Iterator, List, NewType, Tuple

from .board import CELL_COUNT, BoardState, IllegalMoveError

Move = NewType("Move", int)


def legal_moves(state: BoardState) -> List[Move]:
    """Empty cells in ascending order; empty once the game is over."""

    return [Move(cell) for cell in state.legal_moves()]


def is_legal(state: BoardState, cell: int) -> bool:
    if not isinstance(cell, int) or isinstance(cell, bool):
        return False
    return 0 <= cell < CELL_COUNT and not state.is_terminal() and state.is_empty_cell(cell)


def apply_move(state: BoardState, cell: int) -> BoardState:
    return state.apply_move(cell)


def successors(state: BoardState) -> Iterator[Tuple[Move, BoardState]]:
    for move in state.legal_moves():
        yield Move(move), state.apply_move(move)


def play_sequence(state: BoardState, moves: Iterable[int]) -> BoardState:
    """Apply ``moves`` in order, stopping at the first illegal one."""

    for index, move in enumerate(moves):
        try:
            state = state.apply_move(move)
        except IllegalMoveError as exc:
            raise IllegalMoveError(f"Move #{index + 1} ({move!r}): {exc}") from exc
    return state


def replay(moves: Iterable[int]) -> BoardState:
    return play_sequence(BoardState.empty(), moves)


def is_valid_suggestion(state: BoardState, suggestion: object) -> bool:
    """Whether a move proposed outside the core may be applied as-is."""

    return isinstance(suggestion, int) and is_legal(state, suggestion)
