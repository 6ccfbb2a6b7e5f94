"""The Game board: the 64-slot occupancy grid plus the 32 piece records, always kept in agreement"""

from dataclasses import dataclass
from typing import Any, Optional, Self

from src.chess.pieces import NUM_PIECES, PieceRecord
from src.chess.square import NUM_SQUARES, Square
from src.core.shared_types import PieceType

EMPTY_SNAPSHOT_CELL = "**"


@dataclass
class AppliedMove:
    """
    Everything needed to take a move back.

    Snapshot taken by `Board.apply_move()` before any mutation is made.
    """

    index: int
    from_square: Square
    to_square: Square
    captured_index: Optional[int] = None
    promoted_from: Optional[PieceType] = None


@dataclass
class Board:
    grid: list[Optional[int]]
    pieces: list[PieceRecord]

    @classmethod
    def starting_position(cls) -> Self:
        """All 32 pieces on their starting squares"""
        pieces = [PieceRecord.starting(index) for index in range(NUM_PIECES)]
        return cls._from_pieces(pieces)

    @classmethod
    def empty(cls) -> Self:
        """
        Board without any living piece.

        The records still exist (with their starting kind/color/square) so the index layout stays intact.
        """
        pieces = [PieceRecord.starting(index) for index in range(NUM_PIECES)]
        for piece in pieces:
            piece.alive = False
        return cls._from_pieces(pieces)

    @classmethod
    def from_placements(cls, placements: dict[int, str]) -> Self:
        """
        Convenience method to set up an arbitrary position.

        ex) {15: "e1", 31: "e8", 14: "d5"} --> white king on e1, black king on e8, white queen on d5.
        Pieces not mentioned are dead.
        """
        board = cls.empty()
        for index, algebraic in placements.items():
            board.place_piece(index, Square.from_algebraic(algebraic))
        return board

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> Self:
        if len(records) != NUM_PIECES:
            raise ValueError(f"Expected {NUM_PIECES} piece records, got {len(records)}")
        return cls._from_pieces([PieceRecord.from_dict(record) for record in records])

    @classmethod
    def _from_pieces(cls, pieces: list[PieceRecord]) -> Self:
        """Rebuild the occupancy grid from the living pieces"""
        grid: list[Optional[int]] = [None] * NUM_SQUARES
        for index, piece in enumerate(pieces):
            if not piece.alive:
                continue
            if grid[piece.square.index] is not None:
                raise ValueError(
                    f"Two living pieces on {piece.square.to_algebraic()}: {grid[piece.square.index]} and {index}"
                )
            grid[piece.square.index] = index
        return cls(grid, pieces)

    def to_records(self) -> list[dict[str, Any]]:
        return [piece.to_dict() for piece in self.pieces]

    # --- READING THE BOARD ---
    def occupant(self, square: Square) -> Optional[int]:
        """Index of the piece standing on the square, if any"""
        return self.grid[square.index]

    def piece_at(self, square: Square) -> Optional[PieceRecord]:
        index = self.occupant(square)
        return self.pieces[index] if index is not None else None

    def is_empty(self, square: Square) -> bool:
        return self.occupant(square) is None

    def snapshot(self) -> str:
        """
        64 cells of two characters, rank by rank starting on a1, followed by a newline.

        Occupied squares show color + kind (ex. 'WP'), empty ones show '**'.
        """
        cells = [
            self.pieces[index].to_snapshot() if index is not None else EMPTY_SNAPSHOT_CELL
            for index in self.grid
        ]
        return "".join(cells) + "\n"

    def is_consistent(self) -> bool:
        """The grid holds index i exactly on the square of living piece i, and nothing anywhere else."""
        for slot, index in enumerate(self.grid):
            if index is None:
                continue
            piece = self.pieces[index]
            if not piece.alive or piece.square.index != slot:
                return False
        return all(
            self.grid[piece.square.index] == index
            for index, piece in enumerate(self.pieces)
            if piece.alive
        )

    # --- CHANGING THE BOARD (grid and records always updated together) ---
    def place_piece(self, index: int, square: Square) -> None:
        """Bring a piece (back) to life on an empty square"""
        if not self.is_empty(square):
            raise ValueError(f"{square.to_algebraic()} is already occupied")
        piece = self.pieces[index]
        if piece.alive:
            self.grid[piece.square.index] = None
        piece.alive = True
        piece.square = square
        self.grid[square.index] = index

    def remove_piece(self, index: int) -> None:
        """Capture: the record stays, but is marked dead."""
        piece = self.pieces[index]
        if piece.alive:
            self.grid[piece.square.index] = None
            piece.alive = False

    def apply_move(
        self, index: int, to_square: Square, promote_to: Optional[PieceType] = None
    ) -> AppliedMove:
        """
        Tentatively apply a move
        ----

        1. Whatever opposing piece stands on the target square gets captured.
        2. The piece moves (its record and both grid slots)
        3. A pawn gets promoted if a type is given

        The returned AppliedMove can be passed to `undo_move()` to restore the board exactly.
        """
        piece = self.pieces[index]
        applied = AppliedMove(
            index=index,
            from_square=piece.square,
            to_square=to_square,
            captured_index=self.occupant(to_square),
        )

        if applied.captured_index is not None:
            self.pieces[applied.captured_index].alive = False

        self.grid[applied.from_square.index] = None
        self.grid[to_square.index] = index
        piece.square = to_square

        if promote_to is not None:
            applied.promoted_from = piece.kind
            piece.promote_to(promote_to)
        return applied

    def undo_move(self, applied: AppliedMove) -> None:
        """Roll back a move made by `apply_move()`: resurrects the captured piece and reverts a promotion."""
        piece = self.pieces[applied.index]
        if applied.promoted_from is not None:
            piece.promote_to(applied.promoted_from)

        piece.square = applied.from_square
        self.grid[applied.from_square.index] = applied.index
        self.grid[applied.to_square.index] = applied.captured_index

        if applied.captured_index is not None:
            self.pieces[applied.captured_index].alive = True
