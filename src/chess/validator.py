"""
Validation of the moves the human player submits.

The claimed move is checked against the board, then played tentatively: if it leaves the player's own king in check
it is taken back again and rejected.
"""

from dataclasses import dataclass
from typing import Optional

from src.chess.board import AppliedMove, Board
from src.chess.check import in_check
from src.chess.moves import generate_moves
from src.chess.pieces import NON_PROMOTABLE, PROMOTION_RANK, PieceRecord
from src.chess.square import Square
from src.core.exceptions import IllegalMoveError
from src.core.shared_types import Color, PieceType


@dataclass(frozen=True)
class MoveClaim:
    """What the player says is happening: which piece moves where, and what it captures/promotes into."""

    color: Color
    kind: PieceType
    from_square: Square
    to_square: Square
    capture: Optional[PieceType] = None
    promote_to: Optional[PieceType] = None
    # Colors written next to the declared capture / promotion. Only checked against the players by the Game.
    capture_color: Optional[Color] = None
    promotion_color: Optional[Color] = None


def validate_move(board: Board, claim: MoveClaim) -> AppliedMove:
    """
    Play the claimed move if it is legal
    ----

    1. the claimed piece must actually stand on the claimed square
    2. the destination must be one of its candidate moves
    3. taking a piece must be declared, with the right piece type
    4. reaching the last rank with a pawn must be declared as a promotion (and vice versa)
    5. play the move
    6. the own king must not be in check afterwards (otherwise: take the move back)

    Raises IllegalMoveError and leaves the board untouched if any of these fail.
    """
    index = _claimed_piece_index(board, claim)
    piece = board.pieces[index]

    if claim.to_square not in generate_moves(piece, board):
        raise IllegalMoveError(
            f"{claim.kind.name} on {claim.from_square.to_algebraic()} cannot move to {claim.to_square.to_algebraic()}"
        )

    _check_capture_declaration(board, claim)
    _check_promotion_declaration(piece, claim)

    applied = board.apply_move(index, claim.to_square, claim.promote_to)
    if in_check(board, claim.color):
        board.undo_move(applied)
        raise IllegalMoveError(
            f"{claim.from_square.to_algebraic()}-{claim.to_square.to_algebraic()} leaves the king in check"
        )
    return applied


def _claimed_piece_index(board: Board, claim: MoveClaim) -> int:
    """Stale or forged claims (wrong piece, wrong color, empty square) are rejected here."""
    index = board.occupant(claim.from_square)
    if index is None:
        raise IllegalMoveError(f"No piece on {claim.from_square.to_algebraic()}")

    piece = board.pieces[index]
    if piece.color != claim.color or piece.kind != claim.kind or not piece.alive:
        raise IllegalMoveError(
            f"Claimed {claim.color.name} {claim.kind.name} on {claim.from_square.to_algebraic()}, found {piece.color.name} {piece.kind.name}"
        )
    return index


def _check_capture_declaration(board: Board, claim: MoveClaim) -> None:
    """
    An occupied target square always holds an opposing piece (the move generator never lands on your own pieces).

    NOTE: Declaring a capture onto an empty square is tolerated.
    """
    captured = board.piece_at(claim.to_square)
    if captured is None:
        return
    if claim.capture is None:
        raise IllegalMoveError(
            f"Move to {claim.to_square.to_algebraic()} takes a {captured.kind.name}, but no capture was declared"
        )
    if claim.capture != captured.kind:
        raise IllegalMoveError(
            f"Declared capture of a {claim.capture.name}, but {claim.to_square.to_algebraic()} holds a {captured.kind.name}"
        )


def _check_promotion_declaration(piece: PieceRecord, claim: MoveClaim) -> None:
    """A pawn must promote when (and only when) it steps onto its last rank: 7th to 8th for White, 2nd to 1st for Black"""
    last_rank = PROMOTION_RANK[piece.color]
    reaches_last_rank = piece.kind == PieceType.PAWN and claim.to_square.rank == last_rank

    if claim.promote_to is None:
        if reaches_last_rank:
            raise IllegalMoveError("A pawn reaching the last rank must be promoted")
        return

    if claim.promote_to in NON_PROMOTABLE:
        raise IllegalMoveError(f"Cannot promote to a {claim.promote_to.name}")

    second_to_last_rank = last_rank - 1 if piece.color == Color.WHITE else last_rank + 1
    if (
        piece.kind != PieceType.PAWN
        or claim.from_square.rank != second_to_last_rank
        or claim.to_square.rank != last_rank
    ):
        raise IllegalMoveError(
            f"Only a pawn moving onto the last rank can promote ({claim.from_square.to_algebraic()}-{claim.to_square.to_algebraic()})"
        )
