"""Puzzle data model and the catalog puzzles are selected from."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Dict,
    FrozenSet,
    Iterable,
    Iterator,
    Optional,
    Sequence,
    Tuple,
)

from .board import CELL_COUNT, BoardState, Player


class PuzzleType(str, Enum):
    ONE_MOVE_WIN = "one_move_win"
    TWO_MOVE_WIN = "two_move_win"
    DEFENSIVE = "defensive"

    @property
    def display_name(self) -> str:
        return _TYPE_NAMES[self]

    @property
    def instruction(self) -> str:
        return _TYPE_INSTRUCTIONS[self]

    @property
    def solution_length(self) -> int:
        return 2 if self is PuzzleType.TWO_MOVE_WIN else 1


_TYPE_NAMES = {
    PuzzleType.ONE_MOVE_WIN: "Win in One",
    PuzzleType.TWO_MOVE_WIN: "Win in Two",
    PuzzleType.DEFENSIVE: "Defend",
}

_TYPE_INSTRUCTIONS = {
    PuzzleType.ONE_MOVE_WIN: "Find the winning move!",
    PuzzleType.TWO_MOVE_WIN: "Find the sequence to win in two moves",
    PuzzleType.DEFENSIVE: "Block your opponent's winning move!",
}


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def points(self) -> int:
        return _POINTS[self]

    @property
    def next_level(self) -> "Difficulty":
        """The following level; expert stays expert."""

        order = list(Difficulty)
        index = order.index(self)
        return order[min(index + 1, len(order) - 1)]


_POINTS = {
    Difficulty.BEGINNER: 10,
    Difficulty.INTERMEDIATE: 25,
    Difficulty.ADVANCED: 50,
    Difficulty.EXPERT: 100,
}


class PuzzleSource(str, Enum):
    STATIC = "static"
    GENERATED = "generated"
    USER_SUBMITTED = "user_submitted"
    GAME_PLAY = "game_play"


@dataclass(frozen=True)
class PuzzleSpec:
    """A position plus the answer the player is expected to find."""

    id: str
    type: PuzzleType
    difficulty: Difficulty
    board: BoardState
    solution: Tuple[int, ...]
    hint: Optional[str] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)
    source: PuzzleSource = PuzzleSource.STATIC

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", PuzzleType(self.type))
        object.__setattr__(self, "difficulty", Difficulty(self.difficulty))
        object.__setattr__(self, "source", PuzzleSource(self.source))
        object.__setattr__(self, "solution", tuple(self.solution))
        object.__setattr__(self, "tags", frozenset(self.tags))

        if not self.id:
            raise ValueError("Puzzle id must not be empty")
        expected = self.type.solution_length
        if len(self.solution) != expected:
            raise ValueError(
                f"Puzzle {self.id}: {self.type.value} needs {expected} solution "
                f"move(s), got {len(self.solution)}"
            )
        for move in self.solution:
            if (
                isinstance(move, bool)
                or not isinstance(move, int)
                or not 0 <= move < CELL_COUNT
            ):
                raise ValueError(f"Puzzle {self.id}: solution cell {move!r} is off the board")

    @classmethod
    def from_layout(
        cls,
        id: str,
        type: PuzzleType,
        difficulty: Difficulty,
        layout: str,
        to_move: Player,
        solution: Sequence[int],
        hint: Optional[str] = None,
        tags: Iterable[str] = (),
        source: PuzzleSource = PuzzleSource.STATIC,
    ) -> "PuzzleSpec":
        return cls(
            id=id,
            type=type,
            difficulty=difficulty,
            board=BoardState.from_layout(layout, to_move),
            solution=tuple(solution),
            hint=hint,
            tags=frozenset(tags),
            source=source,
        )

    @property
    def first_move(self) -> int:
        return self.solution[0]

    def is_correct_move(self, move: int) -> bool:
        return move in self.solution


class PuzzleCatalog:
    """Ordered, read-only collection of puzzles keyed by id."""

    def __init__(self, puzzles: Iterable[PuzzleSpec] = ()) -> None:
        self._puzzles: Tuple[PuzzleSpec, ...] = tuple(puzzles)
        self._by_id: Dict[str, PuzzleSpec] = {}
        for puzzle in self._puzzles:
            if puzzle.id in self._by_id:
                raise ValueError(f"Duplicate puzzle id {puzzle.id!r}")
            self._by_id[puzzle.id] = puzzle

    def __len__(self) -> int:
        return len(self._puzzles)

    def __iter__(self) -> Iterator[PuzzleSpec]:
        return iter(self._puzzles)

    def __getitem__(self, index: int) -> PuzzleSpec:
        return self._puzzles[index]

    def __contains__(self, puzzle_id: object) -> bool:
        return puzzle_id in self._by_id

    def __repr__(self) -> str:
        return f"PuzzleCatalog({len(self)} puzzles)"

    def get(self, puzzle_id: str) -> Optional[PuzzleSpec]:
        return self._by_id.get(puzzle_id)

    def ids(self) -> Tuple[str, ...]:
        return tuple(puzzle.id for puzzle in self._puzzles)

    def filter(
        self,
        difficulty: Optional[Difficulty] = None,
        puzzle_type: Optional[PuzzleType] = None,
        exclude_ids: Iterable[str] = (),
    ) -> Tuple[PuzzleSpec, ...]:
        excluded = set(exclude_ids)
        return tuple(
            puzzle
            for puzzle in self._puzzles
            if (difficulty is None or puzzle.difficulty == difficulty)
            and (puzzle_type is None or puzzle.type == puzzle_type)
            and puzzle.id not in excluded
        )
