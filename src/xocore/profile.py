"""Puzzle progress for one player: per-puzzle statistics, streaks and level.

Timestamps are always passed in by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, FrozenSet, Mapping, Optional, Set

from .puzzles import Difficulty, PuzzleSpec, PuzzleType

STREAK_WINDOW = timedelta(hours=48)
LEVEL_UP_MIN_ATTEMPTS = 10
LEVEL_UP_SUCCESS_RATE = 80.0
# Solved puzzles are kept out of rotation once attempted this many times.
RECENTLY_SOLVED_MIN_ATTEMPTS = 3


@dataclass
class PuzzleStats:
    attempts: int = 0
    solves: int = 0
    average_solve_seconds: float = 0.0
    last_attempt: Optional[datetime] = None
    last_solve: Optional[datetime] = None

    @property
    def is_solved(self) -> bool:
        return self.solves > 0

    @property
    def success_rate(self) -> float:
        """Percentage of attempts that were solved."""

        if not self.attempts:
            return 0.0
        return self.solves / self.attempts * 100

    def record_attempt(self, solved: bool, seconds: float, when: datetime) -> None:
        self.attempts += 1
        self.last_attempt = when
        if solved:
            self.solves += 1
            self.last_solve = when
            total = self.average_solve_seconds * (self.solves - 1)
            self.average_solve_seconds = (total + seconds) / self.solves


def recently_solved(stats: Mapping[str, PuzzleStats]) -> FrozenSet[str]:
    return frozenset(
        puzzle_id
        for puzzle_id, entry in stats.items()
        if entry.is_solved and entry.attempts >= RECENTLY_SOLVED_MIN_ATTEMPTS
    )


@dataclass(frozen=True)
class ProfileSummary:
    """Headline numbers for a player's puzzle progress."""

    total_attempts: int
    total_solved: int
    success_rate: float
    current_streak: int
    longest_streak: int
    total_points: int
    current_difficulty: Difficulty


@dataclass
class PuzzleProfile:
    current_difficulty: Difficulty = Difficulty.BEGINNER
    current_streak: int = 0
    longest_streak: int = 0
    total_attempts: int = 0
    total_solved: int = 0
    total_points: int = 0
    last_completion: Optional[datetime] = None
    stats: Dict[str, PuzzleStats] = field(default_factory=dict)
    # Counted since reaching current_difficulty
    level_attempts: int = 0
    level_solved: int = 0
    type_solves: Dict[PuzzleType, int] = field(default_factory=dict)
    average_solve_seconds: Dict[Difficulty, float] = field(default_factory=dict)
    solved_by_difficulty: Dict[Difficulty, int] = field(default_factory=dict)
    daily_completions: Set[date] = field(default_factory=set)

    @property
    def success_rate(self) -> float:
        if not self.total_attempts:
            return 0.0
        return self.total_solved / self.total_attempts * 100

    @property
    def should_level_up(self) -> bool:
        if self.current_difficulty is Difficulty.EXPERT:
            return False
        if self.level_attempts < LEVEL_UP_MIN_ATTEMPTS:
            return False
        return self.level_solved / self.level_attempts * 100 >= LEVEL_UP_SUCCESS_RATE

    def is_streak_active(self, now: datetime) -> bool:
        if self.last_completion is None:
            return False
        return now - self.last_completion <= STREAK_WINDOW

    def daily_completed(self, day: date) -> bool:
        return day in self.daily_completions

    def record_attempt(
        self,
        puzzle: PuzzleSpec,
        solved: bool,
        seconds: float,
        when: datetime,
        daily: bool = False,
    ) -> None:
        """Count one attempt; ``daily`` marks the puzzle of the day for ``when``."""

        self.total_attempts += 1
        self.level_attempts += 1
        if solved:
            self.total_solved += 1
            self.level_solved += 1
            self.total_points += puzzle.difficulty.points
            self.type_solves[puzzle.type] = self.type_solves.get(puzzle.type, 0) + 1
            self._update_average(puzzle.difficulty, seconds)
            self._update_streak(when)
            if daily:
                self.daily_completions.add(when.date())

        self.stats.setdefault(puzzle.id, PuzzleStats()).record_attempt(
            solved, seconds, when
        )

        if self.should_level_up:
            self.current_difficulty = self.current_difficulty.next_level
            self.level_attempts = 0
            self.level_solved = 0

    def refresh_streak(self, now: datetime) -> None:
        """Drop a lapsed streak unless today's daily puzzle is already done."""

        if not self.is_streak_active(now) and not self.daily_completed(now.date()):
            self.reset_streak()

    def reset_streak(self) -> None:
        self.current_streak = 0

    def recently_solved_ids(self) -> FrozenSet[str]:
        """Ids the selector should skip for now."""

        return recently_solved(self.stats)

    def summary(self) -> ProfileSummary:
        return ProfileSummary(
            total_attempts=self.total_attempts,
            total_solved=self.total_solved,
            success_rate=self.success_rate,
            current_streak=self.current_streak,
            longest_streak=self.longest_streak,
            total_points=self.total_points,
            current_difficulty=self.current_difficulty,
        )

    def _update_average(self, difficulty: Difficulty, seconds: float) -> None:
        count = self.solved_by_difficulty.get(difficulty, 0)
        total = self.average_solve_seconds.get(difficulty, 0.0) * count
        self.solved_by_difficulty[difficulty] = count + 1
        self.average_solve_seconds[difficulty] = (total + seconds) / (count + 1)

    def _update_streak(self, when: datetime) -> None:
        if self.is_streak_active(when):
            self.current_streak += 1
        else:
            self.current_streak = 1
        self.longest_streak = max(self.longest_streak, self.current_streak)
        self.last_completion = when
