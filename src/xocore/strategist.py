"""Exhaustive negamax search and tactical queries for tic-tac-toe positions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, FrozenSet, Optional

from .board import BoardState, Player, completing_cells
from .moves import Move, is_valid_suggestion, successors

logger = logging.getLogger(__name__)

WIN_SCORE = 1000
DRAW_SCORE = 0
# Scores beyond this magnitude are decided games rather than heuristic guesses.
DECIDED_THRESHOLD = WIN_SCORE // 2

CENTER = 4
CORNERS = (0, 2, 6, 8)
CENTER_WEIGHT = 3
CORNER_WEIGHT = 2


@dataclass(frozen=True)
class AnalysisResult:
    best_move: Optional[Move]
    winning_moves: FrozenSet[Move]
    blocking_moves: FrozenSet[Move]
    score: int
    heuristic: int


# ---- public API ----


def evaluate(state: BoardState, max_depth: Optional[int] = None) -> int:
    """Minimax value of ``state`` for the side to move.

    A position the opponent has already won is worth ``-WIN_SCORE``; every ply
    between the root and the end of the game moves the score one point towards
    zero, so quicker wins and slower losses rank higher.
    """

    _check_depth(max_depth)
    return _negamax(state, max_depth)


def move_scores(state: BoardState, max_depth: Optional[int] = None) -> Dict[Move, int]:
    """Value of every legal move for the mover, in ascending cell order."""

    _check_depth(max_depth)
    child_depth = None if max_depth is None else max_depth - 1
    return {
        move: _backed_up(_negamax(child, child_depth))
        for move, child in successors(state)
    }


def best_move(state: BoardState, max_depth: Optional[int] = None) -> Optional[Move]:
    """Highest scoring move, lowest cell on ties; ``None`` once the game is over."""

    scores = move_scores(state, max_depth)
    if not scores:
        return None
    top = max(scores.values())
    return min(move for move, score in scores.items() if score == top)


def winning_moves(state: BoardState) -> FrozenSet[Move]:
    """Cells that complete a line for the side to move right now."""

    if state.is_terminal():
        return frozenset()
    mover = state.mask_for(state.to_move)
    return frozenset(Move(c) for c in completing_cells(mover, state.occupied_mask))


def blocking_moves(state: BoardState) -> FrozenSet[Move]:
    """Cells the opponent would win on if it were their turn."""

    if state.is_terminal():
        return frozenset()
    threat = state.mask_for(state.to_move.opponent)
    return frozenset(Move(c) for c in completing_cells(threat, state.occupied_mask))


def heuristic_score(state: BoardState, perspective: Player) -> int:
    """Static positional score: the center and the corners favour their owner."""

    score = 0
    owner = state.player_at(CENTER)
    if owner is perspective:
        score += CENTER_WEIGHT
    elif owner is not None:
        score -= CENTER_WEIGHT
    for corner in CORNERS:
        owner = state.player_at(corner)
        if owner is perspective:
            score += CORNER_WEIGHT
        elif owner is not None:
            score -= CORNER_WEIGHT
    return score


def analyze(state: BoardState, max_depth: Optional[int] = None) -> AnalysisResult:
    return AnalysisResult(
        best_move=best_move(state, max_depth),
        winning_moves=winning_moves(state),
        blocking_moves=blocking_moves(state),
        score=evaluate(state, max_depth),
        heuristic=heuristic_score(state, state.to_move),
    )


def choose_move(
    state: BoardState,
    suggestion: Optional[int] = None,
    max_depth: Optional[int] = None,
) -> Optional[Move]:
    """Use an outside suggestion when it is legal, otherwise search."""

    if suggestion is not None:
        if is_valid_suggestion(state, suggestion):
            return Move(suggestion)
        logger.info("Rejected suggested move %r, falling back to search", suggestion)
    return best_move(state, max_depth)


def clear_cache() -> None:
    _negamax.cache_clear()


def cache_size() -> int:
    return _negamax.cache_info().currsize


# ---- core search ----


@lru_cache(maxsize=None)
def _negamax(state: BoardState, depth: Optional[int]) -> int:
    if state.winner() is not None:
        # The previous mover completed a line
        return -WIN_SCORE
    if state.is_full():
        return DRAW_SCORE
    if depth == 0:
        return heuristic_score(state, state.to_move)

    child_depth = None if depth is None else depth - 1
    return max(_backed_up(_negamax(child, child_depth)) for _, child in successors(state))


def _backed_up(child_score: int) -> int:
    score = -child_score
    if score > DECIDED_THRESHOLD:
        return score - 1
    if score < -DECIDED_THRESHOLD:
        return score + 1
    return score


def _check_depth(max_depth: Optional[int]) -> None:
    if max_depth is not None and max_depth < 1:
        raise ValueError(f"max_depth must be at least 1, got {max_depth}")
