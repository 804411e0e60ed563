"""Heuristic hardness label for a position, used to suggest puzzle difficulty."""

from __future__ import annotations

from .board import BoardState
from .puzzles import Difficulty
from .strategist import move_scores

# Moves scoring within this many points of the best move count as equally good.
NEAR_OPTIMAL_TOLERANCE = 100


def near_optimal_count(state: BoardState) -> int:
    scores = move_scores(state)
    if not scores:
        return 0
    top = max(scores.values())
    return sum(1 for score in scores.values() if top - score <= NEAR_OPTIMAL_TOLERANCE)


def estimate(state: BoardState) -> Difficulty:
    """Fewer good moves on a fuller board means a harder position.

    This only suggests a label for authored content; it proves nothing.
    """

    if state.is_terminal():
        return Difficulty.BEGINNER

    count = near_optimal_count(state)
    occupied = state.occupied_count
    if count == 1 and occupied >= 6:
        return Difficulty.EXPERT
    if count <= 2 and occupied >= 5:
        return Difficulty.ADVANCED
    if count <= 3 and occupied >= 4:
        return Difficulty.INTERMEDIATE
    return Difficulty.BEGINNER
