"""Proofs that a puzzle's declared solution is correct for its type.

Only exact search results are used here, never the static heuristic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional

from .board import BoardState, IllegalMoveError
from .moves import successors
from .puzzles import PuzzleSpec, PuzzleType
from .strategist import best_move, blocking_moves, winning_moves

logger = logging.getLogger(__name__)


class ValidationStep(str, Enum):
    """The check a puzzle failed."""

    TERMINAL_BOARD = "terminal_board"
    NO_WINNING_MOVE = "no_winning_move"
    AMBIGUOUS_SOLUTION = "ambiguous_solution"
    WRONG_MOVE = "wrong_move"
    NO_THREAT = "no_threat"
    UNBLOCKABLE = "unblockable"
    ILLEGAL_MOVE = "illegal_move"
    PREMATURE_WIN = "premature_win"
    OPPONENT_WINS = "opponent_wins"
    NOT_FORCED = "not_forced"
    NO_FINISH = "no_finish"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    step: Optional[ValidationStep] = None
    detail: str = ""

    def __bool__(self) -> bool:
        return self.valid


VALID = ValidationResult(True)


def _fail(step: ValidationStep, detail: str) -> ValidationResult:
    return ValidationResult(False, step, detail)


def validate(puzzle: PuzzleSpec) -> ValidationResult:
    board = puzzle.board
    if board.is_terminal():
        return _fail(ValidationStep.TERMINAL_BOARD, "The puzzle starts from a finished game")

    if puzzle.type is PuzzleType.ONE_MOVE_WIN:
        return _validate_one_move(puzzle)
    if puzzle.type is PuzzleType.DEFENSIVE:
        return _validate_defensive(puzzle)
    return _validate_two_move(puzzle)


def validate_catalog(puzzles: Iterable[PuzzleSpec]) -> Dict[str, ValidationResult]:
    results: Dict[str, ValidationResult] = {}
    for puzzle in puzzles:
        result = validate(puzzle)
        results[puzzle.id] = result
        if not result:
            logger.warning(
                "Invalid puzzle %s (%s): %s", puzzle.id, result.step.value, result.detail
            )
    return results


# ---- per-type checks ----


def _validate_one_move(puzzle: PuzzleSpec) -> ValidationResult:
    wins = winning_moves(puzzle.board)
    if not wins:
        return _fail(ValidationStep.NO_WINNING_MOVE, "No move wins immediately")
    if len(wins) > 1:
        return _fail(
            ValidationStep.AMBIGUOUS_SOLUTION,
            f"Several moves win immediately: {sorted(wins)}",
        )
    if puzzle.first_move not in wins:
        return _fail(
            ValidationStep.WRONG_MOVE,
            f"Declared move {puzzle.first_move} does not win; {min(wins)} does",
        )
    return VALID


def _validate_defensive(puzzle: PuzzleSpec) -> ValidationResult:
    blocks = blocking_moves(puzzle.board)
    if not blocks:
        return _fail(ValidationStep.NO_THREAT, "The opponent has no immediate threat")
    if len(blocks) > 1:
        return _fail(
            ValidationStep.UNBLOCKABLE,
            f"Threats on {sorted(blocks)} cannot all be blocked with one move",
        )
    if not set(puzzle.solution) <= blocks:
        return _fail(
            ValidationStep.WRONG_MOVE,
            f"Declared move {puzzle.first_move} does not block {min(blocks)}",
        )
    return VALID


def _validate_two_move(puzzle: PuzzleSpec) -> ValidationResult:
    solver = puzzle.board.to_move
    first, second = puzzle.solution

    try:
        after_first = puzzle.board.apply_move(first)
    except IllegalMoveError as exc:
        return _fail(ValidationStep.ILLEGAL_MOVE, f"First move {first}: {exc}")
    if after_first.is_terminal():
        return _fail(
            ValidationStep.PREMATURE_WIN,
            f"First move {first} already ends the game",
        )

    threats = winning_moves(after_first)
    if threats:
        return _fail(
            ValidationStep.OPPONENT_WINS,
            f"Opponent can win immediately on {sorted(threats)}",
        )

    escape = _find_escape(after_first)
    if escape is not None:
        return _fail(
            ValidationStep.NOT_FORCED,
            f"Opponent reply {escape} leaves no winning second move",
        )

    reply = best_move(after_first)
    # Non-terminal positions always have a reply
    assert reply is not None
    after_reply = after_first.apply_move(reply)
    finishers = winning_moves(after_reply)
    if second not in finishers:
        return _fail(
            ValidationStep.NO_FINISH,
            f"After best reply {reply}, {second} does not win for {solver.value}",
        )
    return VALID


def _find_escape(state: BoardState) -> Optional[int]:
    """First opponent reply after which the solver has no immediate win."""

    for move, child in successors(state):
        if not winning_moves(child):
            return move
    return None
