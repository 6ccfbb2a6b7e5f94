"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define candidate move sets for each piece type.

A candidate is a destination square the piece could reach while ignoring the safety of its own king.
Whether a candidate is legal is decided later by the validator / check detector.
"""

from typing import Callable, Iterator, Optional, Protocol

from src.chess.pieces import HOME_RANKS, PieceRecord
from src.chess.square import Square
from src.core.exceptions import MoveGenerationError
from src.core.shared_types import Color, PieceType

# No piece can ever reach this many squares (a queen in the center reaches 27)
MAX_CANDIDATES = 32


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece_at(self, square: Square) -> Optional[PieceRecord]: ...
    def is_empty(self, square: Square) -> bool: ...


Vector = tuple[int, int]


class CandidateMoves:
    """Fixed capacity collection of destination squares, kept in generation order."""

    def __init__(self, capacity: int = MAX_CANDIDATES) -> None:
        self.capacity = capacity
        self._squares: list[Square] = []

    def append(self, square: Square) -> None:
        if len(self._squares) >= self.capacity:
            raise MoveGenerationError(
                f"More than {self.capacity} candidate moves generated (adding {square.to_algebraic()})"
            )
        self._squares.append(square)

    def extend(self, squares: "CandidateMoves") -> None:
        for square in squares:
            self.append(square)

    def __iter__(self) -> Iterator[Square]:
        return iter(self._squares)

    def __len__(self) -> int:
        return len(self._squares)

    def __contains__(self, square: object) -> bool:
        return square in self._squares

    def __getitem__(self, position: int) -> Square:
        return self._squares[position]

    def to_algebraic(self) -> list[str]:
        return [square.to_algebraic() for square in self._squares]


def _is_opponent(board: Board, square: Square, color: Color) -> bool:
    occupant = board.piece_at(square)
    return occupant is not None and occupant.color != color


# --- MOVEMENT RULES ---
def raycasting_move(
    piece: PieceRecord, board: Board, directions: list[Vector]
) -> CandidateMoves:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.

    * empty square: add it and keep going
    * opponent's piece: add it (it can be captured) and stop
    * own piece: stop without adding it
    """
    moves = CandidateMoves()
    for df, dr in directions:
        target_square = piece.square
        while True:
            target_square = target_square.shifted(df, dr)
            if not target_square.is_within_bounds():
                break

            if not board.is_empty(target_square):
                if _is_opponent(board, target_square, piece.color):
                    moves.append(target_square)
                break

            moves.append(target_square)
    return moves


def single_step_move(
    piece: PieceRecord, board: Board, deltas: list[Vector]
) -> CandidateMoves:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump to a square"""
    moves = CandidateMoves()
    for df, dr in deltas:
        target_square = piece.square.shifted(df, dr)
        if not target_square.is_within_bounds():
            continue

        if board.is_empty(target_square) or _is_opponent(
            board, target_square, piece.color
        ):
            moves.append(target_square)
    return moves


def candidate_pawn_moves(piece: PieceRecord, board: Board) -> CandidateMoves:
    """
    A pawn:
    - can move by two from its starting rank, if it lands on an empty square
    - moves by a single square forward, into an empty square
    - takes diagonally (left first, then right)

    NOTE: The double step does not look at the square in between.
    NOTE: A pawn standing on h1 only gets the double step (if any). Long-standing behaviour of the engine, kept as-is.
    """
    moves = CandidateMoves()
    # White moves up the board, Black moves down the board
    direction = 1 if piece.color == Color.WHITE else -1
    _, pawn_rank = HOME_RANKS[piece.color]

    if piece.square.rank == pawn_rank:
        double_step = piece.square.shifted(0, 2 * direction)
        if double_step.is_within_bounds() and board.is_empty(double_step):
            moves.append(double_step)

    if piece.square == Square(7, 0):
        return moves

    single_step = piece.square.shifted(0, direction)
    if single_step.is_within_bounds() and board.is_empty(single_step):
        moves.append(single_step)

    for df in (-1, 1):
        target_square = piece.square.shifted(df, direction)
        if target_square.is_within_bounds() and _is_opponent(
            board, target_square, piece.color
        ):
            moves.append(target_square)
    return moves


def candidate_knight_moves(piece: PieceRecord, board: Board) -> CandidateMoves:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    knight_deltas: list[Vector] = [
        (-1, -2),
        (-1, 2),
        (1, 2),
        (1, -2),
        (2, -1),
        (2, 1),
        (-2, 1),
        (-2, -1),
    ]
    return single_step_move(piece, board, knight_deltas)


def candidate_rook_moves(piece: PieceRecord, board: Board) -> CandidateMoves:
    """Rooks move either horizontally or vertically"""
    stay_on_rank: list[Vector] = [(1, 0), (-1, 0)]
    stay_on_file: list[Vector] = [(0, 1), (0, -1)]
    return raycasting_move(piece, board, stay_on_rank + stay_on_file)


def candidate_bishop_moves(piece: PieceRecord, board: Board) -> CandidateMoves:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    diagonals: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
    return raycasting_move(piece, board, diagonals)


def candidate_queen_moves(piece: PieceRecord, board: Board) -> CandidateMoves:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    moves = candidate_rook_moves(piece, board)
    moves.extend(candidate_bishop_moves(piece, board))
    return moves


def candidate_king_moves(piece: PieceRecord, board: Board) -> CandidateMoves:
    """
    The king can move by a single square at the time.

    No castling. Walking into check is filtered out later, not here.
    """
    king_deltas: list[Vector] = [
        (1, 0),
        (-1, 0),
        (0, 1),
        (0, -1),
        (1, 1),
        (-1, -1),
        (1, -1),
        (-1, 1),
    ]
    return single_step_move(piece, board, king_deltas)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[PieceRecord, Board], CandidateMoves]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def generate_moves(piece: PieceRecord, board: Board) -> CandidateMoves:
    """Candidate destinations for the piece (read-only with respect to the board)"""
    movement_rule = MOVEMENT_RULES[piece.kind]
    return movement_rule(piece, board)
