"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Chess board is always 8x8.
BOARD_DIMENSIONS = (8, 8)
NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


@dataclass(frozen=True)
class Square:
    """Zero-based coordinates: file 0 is the a-file, rank 0 is the 1st rank."""

    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(sq) != 2 or sq[0] not in FILE_NAMES or sq[1] not in RANK_NAMES:
            raise ValueError(f"Not a square on the board: {sq!r}")
        return cls(FILE_NAMES.index(sq[0]), RANK_NAMES.index(sq[1]))

    @classmethod
    def from_index(cls, index: int) -> Square:
        """Inverse of `index`: slots in the occupancy grid are numbered rank by rank, starting on a1."""
        return cls(index % BOARD_DIMENSIONS[0], index // BOARD_DIMENSIONS[0])

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.file]}{RANK_NAMES[self.rank]}"

    @property
    def index(self) -> int:
        return self.rank * BOARD_DIMENSIONS[0] + self.file

    def is_within_bounds(self) -> bool:
        return (0 <= self.file < BOARD_DIMENSIONS[0]) and (
            0 <= self.rank < BOARD_DIMENSIONS[1]
        )

    def shifted(self, df: int, dr: int) -> Square:
        """The square df files and dr ranks away. Might be off the board!"""
        return Square(self.file + df, self.rank + dr)
