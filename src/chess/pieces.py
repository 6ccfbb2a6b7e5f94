"""Defines the piece records and their fixed index layout"""

from dataclasses import dataclass
from typing import Any, Self

from src.chess.square import Square
from src.core.shared_types import Color, PieceType

NUM_PIECES = 32
PIECES_PER_COLOR = 16

# Offsets within one color's block of 16 records. Black's block starts at PIECES_PER_COLOR.
PAWN_OFFSETS = range(0, 8)
ROOK_OFFSETS = (8, 9)
KNIGHT_OFFSETS = (10, 11)
BISHOP_OFFSETS = (12, 13)
QUEEN_OFFSET = 14
KING_OFFSET = 15

# (piece type, starting file) for every offset 0-15
STARTING_LAYOUT: tuple[tuple[PieceType, int], ...] = (
    *((PieceType.PAWN, file) for file in range(8)),
    (PieceType.ROOK, 0),
    (PieceType.ROOK, 7),
    (PieceType.KNIGHT, 1),
    (PieceType.KNIGHT, 6),
    (PieceType.BISHOP, 2),
    (PieceType.BISHOP, 5),
    (PieceType.QUEEN, 3),
    (PieceType.KING, 4),
)

# (back rank, pawn rank)
HOME_RANKS: dict[Color, tuple[int, int]] = {
    Color.WHITE: (0, 1),
    Color.BLACK: (7, 6),
}

# A pawn reaching this rank must promote
PROMOTION_RANK: dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}

# Cannot promote into these
NON_PROMOTABLE: tuple[PieceType, ...] = (PieceType.PAWN, PieceType.KING)


def color_offset(color: Color) -> int:
    return 0 if color == Color.WHITE else PIECES_PER_COLOR


def piece_indices(color: Color) -> range:
    """Indices of all 16 records of one color, in the fixed scanning order."""
    offset = color_offset(color)
    return range(offset, offset + PIECES_PER_COLOR)


def king_index(color: Color) -> int:
    """The king never changes identity: always index 15 (white) or 31 (black)."""
    return color_offset(color) + KING_OFFSET


def starting_square(index: int) -> Square:
    color = Color.WHITE if index < PIECES_PER_COLOR else Color.BLACK
    piece_type, file = STARTING_LAYOUT[index % PIECES_PER_COLOR]
    back_rank, pawn_rank = HOME_RANKS[color]
    return Square(file, pawn_rank if piece_type == PieceType.PAWN else back_rank)


@dataclass
class PieceRecord:
    """
    One of the 32 pieces. Identity = position in the board's piece list.

    Captured pieces are not removed: they keep their kind and last square, but are no longer alive.
    """

    kind: PieceType
    color: Color
    alive: bool
    square: Square

    @classmethod
    def starting(cls, index: int) -> Self:
        """The record with the given index, as it stands at the start of a game."""
        color = Color.WHITE if index < PIECES_PER_COLOR else Color.BLACK
        piece_type, _ = STARTING_LAYOUT[index % PIECES_PER_COLOR]
        return cls(piece_type, color, True, starting_square(index))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            kind=PieceType(data["kind"]),
            color=Color(data["color"]),
            alive=bool(data["alive"]),
            square=Square.from_algebraic(data["square"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "color": self.color.value,
            "alive": self.alive,
            "square": self.square.to_algebraic(),
        }

    def to_snapshot(self) -> str:
        """Two characters: color letter and kind letter (ex. 'WP')"""
        return f"{self.color.value}{self.kind.value}"

    def promote_to(self, new_type: PieceType) -> None:
        self.kind = new_type
