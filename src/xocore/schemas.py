"""Pydantic payloads for the HTTP service and puzzle catalog files."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .board import BoardState, Player
from .profile import PuzzleStats
from .puzzles import Difficulty, PuzzleSource, PuzzleSpec, PuzzleType


class BoardPayload(BaseModel):
    """A position as text rows, e.g. ``"XX.|OO.|..."``, plus the side to move."""

    model_config = ConfigDict(populate_by_name=True)

    cells: str = Field(default="...|...|...", description="Rows of X, O and .")
    to_move: Player = Field(default=Player.X, alias="toMove")

    @field_validator("cells")
    @classmethod
    def ensure_nine_cells(cls, value: str) -> str:
        if len(value.replace("|", "")) != 9:
            raise ValueError("A board needs exactly 9 cells")
        return value

    def to_state(self) -> BoardState:
        """Raises ``InvalidBoardError`` when no game reaches this position."""

        return BoardState.from_layout(self.cells, self.to_move)

    @classmethod
    def from_state(cls, state: BoardState) -> "BoardPayload":
        return cls(cells=state.to_layout(), to_move=state.to_move)


class MoveRequest(BaseModel):
    """Request payload for applying one move to a posted position."""

    board: BoardPayload
    cell: int = Field(ge=0, le=8)


class OpponentRequest(BaseModel):
    """Ask for the core's move, optionally vetting an outside suggestion."""

    model_config = ConfigDict(populate_by_name=True)

    board: BoardPayload
    suggestion: Optional[int] = None
    max_depth: Optional[int] = Field(default=None, alias="maxDepth", ge=1, le=9)


class NewGameRequest(BaseModel):
    """Request payload for starting a game against the strategist."""

    model_config = ConfigDict(populate_by_name=True)

    human: Player = Field(default=Player.X, description="Side played by the caller")
    max_depth: Optional[int] = Field(
        default=None,
        alias="maxDepth",
        ge=1,
        le=9,
        description="Search depth cap; omit for perfect play",
    )


class GameMoveRequest(BaseModel):
    cell: int = Field(ge=0, le=8)


class StatsPayload(BaseModel):
    attempts: int = Field(default=0, ge=0)
    solves: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def ensure_consistent(self) -> "StatsPayload":
        if self.solves > self.attempts:
            raise ValueError("solves cannot exceed attempts")
        return self

    def to_stats(self) -> PuzzleStats:
        return PuzzleStats(attempts=self.attempts, solves=self.solves)


class SelectRequest(BaseModel):
    """Request payload for picking a puzzle for a player."""

    model_config = ConfigDict(populate_by_name=True)

    difficulty: Difficulty = Difficulty.BEGINNER
    puzzle_type: Optional[PuzzleType] = Field(default=None, alias="type")
    exclude_ids: List[str] = Field(default_factory=list, alias="excludeIds")
    stats: Dict[str, StatsPayload] = Field(default_factory=dict)
    seed: Optional[int] = None


class AttemptRequest(BaseModel):
    """One solve attempt reported for a profile."""

    model_config = ConfigDict(populate_by_name=True)

    puzzle_id: str = Field(alias="puzzleId", min_length=1)
    solved: bool
    seconds: float = Field(default=0.0, ge=0)
    completed_at: Optional[datetime] = Field(
        default=None,
        alias="completedAt",
        description="When the attempt ended; defaults to the time of the request",
    )


class NextPuzzleRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    puzzle_type: Optional[PuzzleType] = Field(default=None, alias="type")
    seed: Optional[int] = None


class PuzzlePayload(BaseModel):
    """One puzzle as stored in a catalog file or posted for validation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    type: PuzzleType
    difficulty: Difficulty
    board: BoardPayload
    solution: List[Annotated[int, Field(ge=0, le=8)]]
    hint: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    source: PuzzleSource = PuzzleSource.STATIC

    @model_validator(mode="after")
    def ensure_solution_shape(self) -> "PuzzlePayload":
        expected = self.type.solution_length
        if len(self.solution) != expected:
            raise ValueError(
                f"{self.type.value} needs {expected} solution move(s), "
                f"got {len(self.solution)}"
            )
        return self

    def to_puzzle(self) -> PuzzleSpec:
        return PuzzleSpec(
            id=self.id,
            type=self.type,
            difficulty=self.difficulty,
            board=self.board.to_state(),
            solution=tuple(self.solution),
            hint=self.hint,
            tags=frozenset(self.tags),
            source=self.source,
        )

    @classmethod
    def from_puzzle(cls, puzzle: PuzzleSpec) -> "PuzzlePayload":
        return cls(
            id=puzzle.id,
            type=puzzle.type,
            difficulty=puzzle.difficulty,
            board=BoardPayload.from_state(puzzle.board),
            solution=list(puzzle.solution),
            hint=puzzle.hint,
            tags=sorted(puzzle.tags),
            source=puzzle.source,
        )
