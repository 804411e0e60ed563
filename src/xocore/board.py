"""Bitboard rules for a 3x3 tic-tac-toe position."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


class Player(str, Enum):
    X = "X"
    O = "O"

    @property
    def opponent(self) -> "Player":
        return Player.O if self is Player.X else Player.X


# Cell 0 is the most significant bit so binary literals read like the board:
# 0b110_000_000 is the top-left and top-middle cells.
CELL_COUNT = 9
FULL_MASK = 0b111_111_111

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

EMPTY_MARKS = ".-_ "


def cell_bit(cell: int) -> int:
    return 1 << (CELL_COUNT - 1 - cell)


def line_mask(line: Tuple[int, int, int]) -> int:
    a, b, c = line
    return cell_bit(a) | cell_bit(b) | cell_bit(c)


WINNING_MASKS: Tuple[int, ...] = tuple(line_mask(line) for line in WINNING_LINES)


def has_line(mask: int) -> bool:
    return any(mask & pattern == pattern for pattern in WINNING_MASKS)


def completing_cells(mask: int, occupied: int) -> Tuple[int, ...]:
    """Empty cells that would give ``mask`` a full line, ascending."""

    cells = []
    for cell in range(CELL_COUNT):
        bit = cell_bit(cell)
        if occupied & bit:
            continue
        if has_line(mask | bit):
            cells.append(cell)
    return tuple(cells)


class IllegalMoveError(ValueError):
    """Raised when a move cannot be applied to a position."""


class InvalidBoardError(ValueError):
    """Raised when masks and turn do not describe a reachable position."""


@dataclass(frozen=True)
class BoardState:
    x_mask: int = 0
    o_mask: int = 0
    to_move: Player = Player.X

    def __post_init__(self) -> None:
        for name in ("x_mask", "o_mask"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0 or value > FULL_MASK:
                raise InvalidBoardError(f"{name} must be a 9-bit mask, got {value!r}")
        if self.x_mask & self.o_mask:
            raise InvalidBoardError("A cell cannot be owned by both players")
        # Accept plain "X"/"O" strings as well as Player members
        try:
            object.__setattr__(self, "to_move", Player(self.to_move))
        except ValueError as exc:
            raise InvalidBoardError(f"Unknown player {self.to_move!r}") from exc

        x_count = bin(self.x_mask).count("1")
        o_count = bin(self.o_mask).count("1")
        if abs(x_count - o_count) > 1:
            raise InvalidBoardError(
                f"Piece counts X={x_count} O={o_count} differ by more than one"
            )
        if x_count > o_count and self.to_move is not Player.O:
            raise InvalidBoardError("O must move when X has the extra piece")
        if o_count > x_count and self.to_move is not Player.X:
            raise InvalidBoardError("X must move when O has the extra piece")
        if has_line(self.x_mask) and has_line(self.o_mask):
            raise InvalidBoardError("Both players cannot own a winning line")
        # Only the player who just moved can have completed a line
        if has_line(self.mask_for(self.to_move)):
            raise InvalidBoardError(
                f"{self.to_move.value} already owns a line but is the side to move"
            )

    # ---- construction ----

    @classmethod
    def empty(cls) -> "BoardState":
        return cls()

    @classmethod
    def from_masks(cls, x_mask: int, o_mask: int, to_move: Player) -> "BoardState":
        return cls(x_mask=x_mask, o_mask=o_mask, to_move=to_move)

    @classmethod
    def from_layout(cls, layout: str, to_move: Player) -> "BoardState":
        """Build a position from text such as ``"XX.|OO.|..."``.

        ``|`` separators are ignored; ``.``, ``-``, ``_`` and space mark an
        empty cell.
        """

        cells = layout.replace("|", "").upper()
        if len(cells) != CELL_COUNT:
            raise InvalidBoardError(f"Layout must describe 9 cells: {layout!r}")
        x_mask = o_mask = 0
        for cell, mark in enumerate(cells):
            if mark == "X":
                x_mask |= cell_bit(cell)
            elif mark == "O":
                o_mask |= cell_bit(cell)
            elif mark not in EMPTY_MARKS:
                raise InvalidBoardError(f"Unknown mark {mark!r} in layout {layout!r}")
        return cls(x_mask=x_mask, o_mask=o_mask, to_move=to_move)

    # ---- queries ----

    @property
    def last_mover(self) -> Player:
        return self.to_move.opponent

    @property
    def occupied_mask(self) -> int:
        return self.x_mask | self.o_mask

    @property
    def occupied_count(self) -> int:
        return bin(self.occupied_mask).count("1")

    def mask_for(self, player: Player) -> int:
        return self.x_mask if player is Player.X else self.o_mask

    def player_at(self, cell: int) -> Optional[Player]:
        if not 0 <= cell < CELL_COUNT:
            return None
        bit = cell_bit(cell)
        if self.x_mask & bit:
            return Player.X
        if self.o_mask & bit:
            return Player.O
        return None

    def is_empty_cell(self, cell: int) -> bool:
        return 0 <= cell < CELL_COUNT and not self.occupied_mask & cell_bit(cell)

    def winner(self) -> Optional[Player]:
        x_wins = has_line(self.x_mask)
        o_wins = has_line(self.o_mask)
        assert not (x_wins and o_wins), "both players own a winning line"
        if x_wins:
            return Player.X
        if o_wins:
            return Player.O
        return None

    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        """The first completed line, for drawing a strike-through."""

        for line, pattern in zip(WINNING_LINES, WINNING_MASKS):
            if self.x_mask & pattern == pattern or self.o_mask & pattern == pattern:
                return line
        return None

    def is_full(self) -> bool:
        return self.occupied_mask == FULL_MASK

    def is_draw(self) -> bool:
        return self.is_full() and self.winner() is None

    def is_terminal(self) -> bool:
        return self.winner() is not None or self.is_full()

    def legal_moves(self) -> Iterator[int]:
        if self.is_terminal():
            return
        occupied = self.occupied_mask
        for cell in range(CELL_COUNT):
            if not occupied & cell_bit(cell):
                yield cell

    # ---- transitions ----

    def apply_move(self, cell: int) -> "BoardState":
        """Return the position after ``to_move`` plays ``cell``."""

        if not isinstance(cell, int) or isinstance(cell, bool) or not 0 <= cell < CELL_COUNT:
            raise IllegalMoveError(f"Cell {cell!r} is outside the board")
        if self.is_terminal():
            raise IllegalMoveError("Game already finished")
        bit = cell_bit(cell)
        if self.occupied_mask & bit:
            raise IllegalMoveError(f"Cell {cell} is already occupied")
        if self.to_move is Player.X:
            return BoardState(self.x_mask | bit, self.o_mask, Player.O)
        return BoardState(self.x_mask, self.o_mask | bit, Player.X)

    # ---- text ----

    def cells(self) -> Tuple[str, ...]:
        """Nine marks, ``"X"``, ``"O"`` or ``"."``."""

        marks = []
        for cell in range(CELL_COUNT):
            player = self.player_at(cell)
            marks.append(player.value if player else ".")
        return tuple(marks)

    def to_layout(self) -> str:
        marks = "".join(self.cells())
        return f"{marks[0:3]}|{marks[3:6]}|{marks[6:9]}"

    def __str__(self) -> str:
        rows = []
        for row in range(3):
            rows.append(" | ".join(self.cells()[row * 3 : row * 3 + 3]))
        return "\n---------\n".join(rows)
