"""Tests for the puzzle model, the built-in library and catalog files."""

import json

import pytest

from xocore.board import Player
from xocore.library import STATIC_PUZZLES, default_catalog, dump_catalog, load_catalog
from xocore.puzzles import Difficulty, PuzzleCatalog, PuzzleSource, PuzzleSpec, PuzzleType


def test_library_ids_are_unique():
    ids = [puzzle.id for puzzle in STATIC_PUZZLES]
    assert len(ids) == len(set(ids)) == 17


def test_every_level_and_type_is_covered():
    catalog = default_catalog()
    for level in Difficulty:
        assert catalog.filter(difficulty=level)
    for kind in PuzzleType:
        assert catalog.filter(puzzle_type=kind)


def test_solution_length_must_match_type():
    with pytest.raises(ValueError, match="needs 2"):
        PuzzleSpec.from_layout(
            "short", PuzzleType.TWO_MOVE_WIN, Difficulty.ADVANCED,
            "X..|.O.|O.X", Player.X, [2],
        )


def test_solution_cells_must_be_on_the_board():
    with pytest.raises(ValueError, match="off the board"):
        PuzzleSpec.from_layout(
            "wide", PuzzleType.ONE_MOVE_WIN, Difficulty.BEGINNER,
            "XX.|OO.|...", Player.X, [9],
        )


def test_solution_cells_must_be_plain_ints():
    with pytest.raises(ValueError, match="off the board"):
        PuzzleSpec.from_layout(
            "flag", PuzzleType.ONE_MOVE_WIN, Difficulty.BEGINNER,
            "XX.|OO.|...", Player.X, [True],
        )


def test_enum_values_are_coerced():
    puzzle = PuzzleSpec.from_layout(
        "coerced", "defensive", "expert", "OO.|X..|...", Player.X, [2], source="generated"
    )
    assert puzzle.type is PuzzleType.DEFENSIVE
    assert puzzle.difficulty is Difficulty.EXPERT
    assert puzzle.source is PuzzleSource.GENERATED
    assert puzzle.is_correct_move(2)
    assert not puzzle.is_correct_move(5)


def test_type_and_level_metadata():
    assert PuzzleType.TWO_MOVE_WIN.display_name == "Win in Two"
    assert PuzzleType.DEFENSIVE.solution_length == 1
    assert [level.points for level in Difficulty] == [10, 25, 50, 100]
    assert Difficulty.ADVANCED.next_level is Difficulty.EXPERT
    assert Difficulty.EXPERT.next_level is Difficulty.EXPERT


def test_catalog_rejects_duplicate_ids():
    puzzle = STATIC_PUZZLES[0]
    with pytest.raises(ValueError, match="Duplicate"):
        PuzzleCatalog([puzzle, puzzle])


def test_catalog_lookup_and_filter():
    catalog = default_catalog()
    assert "beginner_row_1" in catalog
    assert catalog.get("missing") is None
    assert catalog[0].id == "beginner_row_1"

    defensive_experts = catalog.filter(Difficulty.EXPERT, PuzzleType.DEFENSIVE)
    assert [p.id for p in defensive_experts] == ["expert_block_1", "expert_block_2"]

    remaining = catalog.filter(
        Difficulty.EXPERT, PuzzleType.DEFENSIVE, exclude_ids=["expert_block_1"]
    )
    assert [p.id for p in remaining] == ["expert_block_2"]


def test_catalog_file_round_trip(tmp_path):
    path = tmp_path / "puzzles.json"
    path.write_bytes(dump_catalog(default_catalog()))

    raw = json.loads(path.read_text())
    assert raw[0]["board"] == {"cells": "XX.|OO.|...", "toMove": "X"}

    loaded = load_catalog(path)
    assert loaded.ids() == default_catalog().ids()
    assert list(loaded) == list(STATIC_PUZZLES)


def test_catalog_file_with_unreachable_board_is_rejected(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "broken",
                    "type": "one_move_win",
                    "difficulty": "beginner",
                    "board": {"cells": "XXX|XX.|...", "toMove": "O"},
                    "solution": [5],
                }
            ]
        )
    )
    with pytest.raises(ValueError):
        load_catalog(path)
