"""Deterministic puzzle selection by profile or by calendar day."""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Iterable, Optional

from .puzzles import Difficulty, PuzzleCatalog, PuzzleSpec, PuzzleType

logger = logging.getLogger(__name__)

# Day zero of the daily puzzle rotation.
DAILY_EPOCH = date(2025, 1, 1)


def select_for_profile(
    catalog: PuzzleCatalog,
    difficulty: Difficulty,
    puzzle_type: Optional[PuzzleType],
    exclude_ids: Iterable[str],
    rng: random.Random,
) -> Optional[PuzzleSpec]:
    """Pick a puzzle for a player, loosening filters until something matches.

    Filters are dropped in order: the exclusion list, then the difficulty,
    then the type. Returns ``None`` only for an empty catalog.
    """

    excluded = frozenset(exclude_ids)
    attempts = (
        (
            "difficulty, type and exclusions",
            dict(difficulty=difficulty, puzzle_type=puzzle_type, exclude_ids=excluded),
        ),
        ("difficulty and type", dict(difficulty=difficulty, puzzle_type=puzzle_type)),
        ("type", dict(puzzle_type=puzzle_type)),
        ("no filters", {}),
    )
    for label, filters in attempts:
        candidates = catalog.filter(**filters)
        if candidates:
            return candidates[rng.randrange(len(candidates))]
        logger.debug("No puzzle matches %s, relaxing", label)
    return None


def day_index(day: date) -> int:
    """Whole days between ``DAILY_EPOCH`` and ``day`` (negative before it)."""

    return day.toordinal() - DAILY_EPOCH.toordinal()


def select_daily(catalog: PuzzleCatalog, day: date) -> Optional[PuzzleSpec]:
    """The same calendar day always maps to the same puzzle."""

    if not len(catalog):
        return None
    return catalog[day_index(day) % len(catalog)]
