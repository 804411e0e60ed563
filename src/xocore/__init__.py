"""xocore package exposing tic-tac-toe rules, search, puzzles and the web service."""

from .board import BoardState, IllegalMoveError, InvalidBoardError, Player
from .puzzles import Difficulty, PuzzleCatalog, PuzzleSpec, PuzzleType
from .strategist import AnalysisResult, analyze, best_move, blocking_moves, winning_moves
from .validator import ValidationResult, validate

__all__ = [
    "AnalysisResult",
    "BoardState",
    "Difficulty",
    "IllegalMoveError",
    "InvalidBoardError",
    "Player",
    "PuzzleCatalog",
    "PuzzleSpec",
    "PuzzleType",
    "ValidationResult",
    "analyze",
    "best_move",
    "blocking_moves",
    "validate",
    "winning_moves",
]
