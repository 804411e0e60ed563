"""Hand-authored puzzles shipped with the package.

Layouts read row by row, ``|`` between rows. Every entry here must pass
``xocore.validator.validate``; the test-suite enforces it.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple, Union

from pydantic import TypeAdapter

from .board import Player
from .puzzles import Difficulty, PuzzleCatalog, PuzzleSpec, PuzzleType
from .schemas import PuzzlePayload

ONE = PuzzleType.ONE_MOVE_WIN
TWO = PuzzleType.TWO_MOVE_WIN
DEFEND = PuzzleType.DEFENSIVE

STATIC_PUZZLES: Tuple[PuzzleSpec, ...] = (
    # ---------- Beginner ----------
    PuzzleSpec.from_layout(
        "beginner_row_1", ONE, Difficulty.BEGINNER,
        "XX.|OO.|...", Player.X, [2],
        hint="Complete your row to win!", tags=("row", "simple"),
    ),
    PuzzleSpec.from_layout(
        "beginner_col_1", ONE, Difficulty.BEGINNER,
        "X.O|X.O|...", Player.O, [8],
        hint="Complete your column!", tags=("column", "simple"),
    ),
    PuzzleSpec.from_layout(
        "beginner_diag_1", ONE, Difficulty.BEGINNER,
        "X.O|OX.|...", Player.X, [8],
        hint="Think diagonally!", tags=("diagonal", "simple"),
    ),
    PuzzleSpec.from_layout(
        "beginner_diag_2", ONE, Difficulty.BEGINNER,
        "..O|XOX|...", Player.O, [6],
        hint="Complete the other diagonal!", tags=("diagonal", "simple"),
    ),
    PuzzleSpec.from_layout(
        "beginner_block_1", DEFEND, Difficulty.BEGINNER,
        "OO.|X..|...", Player.X, [2],
        hint="Stop your opponent from winning!", tags=("block", "row"),
    ),
    PuzzleSpec.from_layout(
        "beginner_block_2", DEFEND, Difficulty.BEGINNER,
        "X..|X.O|...", Player.O, [6],
        hint="Block the column!", tags=("block", "column"),
    ),
    # ---------- Intermediate ----------
    PuzzleSpec.from_layout(
        "intermediate_diag_1", ONE, Difficulty.INTERMEDIATE,
        "X..|.XO|.O.", Player.X, [8],
        hint="Look for the winning diagonal!", tags=("diagonal",),
    ),
    PuzzleSpec.from_layout(
        "intermediate_corner_1", ONE, Difficulty.INTERMEDIATE,
        "OXX|.O.|...", Player.O, [8],
        hint="Complete your diagonal!", tags=("diagonal", "corner"),
    ),
    PuzzleSpec.from_layout(
        "intermediate_block_1", DEFEND, Difficulty.INTERMEDIATE,
        "O..|.O.|X..", Player.X, [8],
        hint="Block the diagonal threat!", tags=("block", "diagonal"),
    ),
    # ---------- Advanced ----------
    PuzzleSpec.from_layout(
        "advanced_win_1", ONE, Difficulty.ADVANCED,
        "X.X|OO.|.XO", Player.X, [1],
        hint="Winning beats blocking.", tags=("row", "distraction"),
    ),
    PuzzleSpec.from_layout(
        "advanced_block_1", DEFEND, Difficulty.ADVANCED,
        "XOX|.O.|...", Player.X, [7],
        hint="Watch the middle column!", tags=("block", "column", "critical"),
    ),
    PuzzleSpec.from_layout(
        "advanced_twomove_1", TWO, Difficulty.ADVANCED,
        "X..|.O.|O.X", Player.X, [2, 5],
        hint="Block and attack at the same time.", tags=("two_move", "fork"),
    ),
    PuzzleSpec.from_layout(
        "advanced_twomove_2", TWO, Difficulty.ADVANCED,
        ".O.|OXX|.X.", Player.O, [0, 6],
        hint="Your two edges share a corner.", tags=("two_move", "fork"),
    ),
    # ---------- Expert ----------
    PuzzleSpec.from_layout(
        "expert_win_1", ONE, Difficulty.EXPERT,
        "X.O|OXX|O..", Player.X, [8],
        hint="Only one line is still open.", tags=("diagonal", "crowded"),
    ),
    PuzzleSpec.from_layout(
        "expert_block_1", DEFEND, Difficulty.EXPERT,
        "X..|.OX|X.O", Player.O, [3],
        hint="One wrong move and you lose!", tags=("block", "column", "critical"),
    ),
    PuzzleSpec.from_layout(
        "expert_block_2", DEFEND, Difficulty.EXPERT,
        "XX.|OOX|.OX", Player.O, [2],
        hint="Two threats, one cell.", tags=("block", "converging"),
    ),
    PuzzleSpec.from_layout(
        "expert_twomove_1", TWO, Difficulty.EXPERT,
        "XO.|OOX|.X.", Player.X, [8, 6],
        hint="Master-level tactics required!", tags=("two_move", "fork"),
    ),
)


_CATALOG_FILE = TypeAdapter(List[PuzzlePayload])


def default_catalog() -> PuzzleCatalog:
    return PuzzleCatalog(STATIC_PUZZLES)


def load_catalog(path: Union[str, Path]) -> PuzzleCatalog:
    """Read a JSON list of puzzles in the ``PuzzlePayload`` shape."""

    payloads = _CATALOG_FILE.validate_json(Path(path).read_bytes())
    return PuzzleCatalog(payload.to_puzzle() for payload in payloads)


def dump_catalog(catalog: PuzzleCatalog) -> bytes:
    payloads = [PuzzlePayload.from_puzzle(puzzle) for puzzle in catalog]
    return _CATALOG_FILE.dump_json(payloads, by_alias=True, indent=2)
