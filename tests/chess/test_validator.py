"""Unit tests for src/chess/validator.py"""

from typing import Optional

import pytest

from src.chess.board import Board
from src.chess.check import in_check
from src.chess.square import Square
from src.chess.validator import MoveClaim, validate_move
from src.core.exceptions import IllegalMoveError
from src.core.shared_types import Color, PieceType


def claim(
    move: str,
    color: Color = Color.WHITE,
    kind: PieceType = PieceType.PAWN,
    capture: Optional[PieceType] = None,
    promote_to: Optional[PieceType] = None,
) -> MoveClaim:
    """claim('e2e4') --> white pawn from e2 to e4"""
    return MoveClaim(
        color=color,
        kind=kind,
        from_square=Square.from_algebraic(move[:2]),
        to_square=Square.from_algebraic(move[2:]),
        capture=capture,
        promote_to=promote_to,
    )


def assert_rejected_without_change(board: Board, move: MoveClaim) -> None:
    before = board.to_records()
    with pytest.raises(IllegalMoveError):
        validate_move(board, move)
    assert board.to_records() == before
    assert board.is_consistent()


@pytest.fixture
def queen_takes_pawn() -> Board:
    """White queen on d1 can take the black pawn on d7"""
    return Board.from_placements({15: "e1", 31: "h5", 14: "d1", 19: "d7"})


@pytest.fixture
def pinned_rook() -> Board:
    """White rook on e2 is pinned by the black rook on e8. A black knight on d2 is hanging"""
    return Board.from_placements({15: "e1", 8: "e2", 24: "e8", 31: "a8", 26: "d2"})


# --- ACCEPTED MOVES ---
def test_pawn_push_accepted() -> None:
    board = Board.starting_position()
    applied = validate_move(board, claim("e2e4"))
    assert applied.index == 4
    assert board.is_empty(Square.from_algebraic("e2"))
    assert board.piece_at(Square.from_algebraic("e4")).to_snapshot() == "WP"
    assert board.is_consistent()
    assert not in_check(board, Color.WHITE)


def test_declared_capture_accepted(queen_takes_pawn: Board) -> None:
    applied = validate_move(
        queen_takes_pawn, claim("d1d7", kind=PieceType.QUEEN, capture=PieceType.PAWN)
    )
    assert applied.captured_index == 19
    assert not queen_takes_pawn.pieces[19].alive
    assert queen_takes_pawn.occupant(Square.from_algebraic("d7")) == 14


def test_declared_capture_on_empty_square_is_tolerated() -> None:
    board = Board.starting_position()
    validate_move(board, claim("e2e4", capture=PieceType.PAWN))
    assert board.occupant(Square.from_algebraic("e4")) == 4


# --- STALE / FORGED CLAIMS ---
@pytest.mark.parametrize(
    "move",
    [
        # nothing on e3
        claim("e3e4"),
        # e2 holds a pawn, not a knight
        claim("e2e4", kind=PieceType.KNIGHT),
        # e7 holds a black pawn
        claim("e7e5"),
        # not a candidate move
        claim("e2e5"),
        claim("b1d2", kind=PieceType.KNIGHT),
    ],
)
def test_claims_that_do_not_match_the_board(move: MoveClaim) -> None:
    assert_rejected_without_change(Board.starting_position(), move)


# --- CAPTURE DECLARATIONS ---
def test_undeclared_capture_rejected(queen_takes_pawn: Board) -> None:
    assert_rejected_without_change(queen_takes_pawn, claim("d1d7", kind=PieceType.QUEEN))


def test_capture_of_wrong_kind_rejected(queen_takes_pawn: Board) -> None:
    assert_rejected_without_change(
        queen_takes_pawn, claim("d1d7", kind=PieceType.QUEEN, capture=PieceType.KNIGHT)
    )


# --- SELF CHECK ---
def test_pinned_piece_cannot_leave_the_line(pinned_rook: Board) -> None:
    assert_rejected_without_change(pinned_rook, claim("e2f2", kind=PieceType.ROOK))


def test_rollback_resurrects_captured_piece(pinned_rook: Board) -> None:
    """Taking the knight would expose the king: the knight must be alive again afterwards"""
    assert_rejected_without_change(
        pinned_rook, claim("e2d2", kind=PieceType.ROOK, capture=PieceType.KNIGHT)
    )
    assert pinned_rook.pieces[26].alive


def test_pinned_piece_may_move_along_the_line(pinned_rook: Board) -> None:
    validate_move(pinned_rook, claim("e2e8", kind=PieceType.ROOK, capture=PieceType.ROOK))
    assert not pinned_rook.pieces[24].alive


def test_king_cannot_walk_into_check() -> None:
    board = Board.from_placements({15: "e1", 31: "a8", 24: "d8"})
    assert_rejected_without_change(board, claim("e1d1", kind=PieceType.KING))
    validate_move(board, claim("e1f1", kind=PieceType.KING))


# --- PROMOTION ---
@pytest.fixture
def pawn_on_seventh() -> Board:
    return Board.from_placements({15: "e1", 31: "h5", 0: "a7", 25: "b8"})


def test_promotion_required(pawn_on_seventh: Board) -> None:
    assert_rejected_without_change(pawn_on_seventh, claim("a7a8"))


@pytest.mark.parametrize("promote_to", [PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT])
def test_promotion_accepted(pawn_on_seventh: Board, promote_to: PieceType) -> None:
    applied = validate_move(pawn_on_seventh, claim("a7a8", promote_to=promote_to))
    assert applied.promoted_from == PieceType.PAWN
    assert pawn_on_seventh.pieces[0].kind == promote_to


@pytest.mark.parametrize("promote_to", [PieceType.PAWN, PieceType.KING])
def test_promotion_to_pawn_or_king_rejected(pawn_on_seventh: Board, promote_to: PieceType) -> None:
    assert_rejected_without_change(pawn_on_seventh, claim("a7a8", promote_to=promote_to))


def test_capture_with_promotion(pawn_on_seventh: Board) -> None:
    validate_move(
        pawn_on_seventh,
        claim("a7b8", capture=PieceType.ROOK, promote_to=PieceType.KNIGHT),
    )
    assert not pawn_on_seventh.pieces[25].alive
    assert pawn_on_seventh.piece_at(Square.from_algebraic("b8")).to_snapshot() == "WN"


def test_promotion_declared_without_reaching_last_rank() -> None:
    assert_rejected_without_change(
        Board.starting_position(), claim("e2e4", promote_to=PieceType.QUEEN)
    )


def test_promotion_declared_for_other_piece() -> None:
    board = Board.from_placements({15: "e1", 31: "h5", 8: "a7"})
    assert_rejected_without_change(
        board, claim("a7a8", kind=PieceType.ROOK, promote_to=PieceType.QUEEN)
    )


def test_black_promotes_on_first_rank() -> None:
    board = Board.from_placements({31: "e8", 15: "h5", 16: "b2"})
    validate_move(
        board, claim("b2b1", color=Color.BLACK, promote_to=PieceType.ROOK)
    )
    assert board.piece_at(Square.from_algebraic("b1")).to_snapshot() == "BR"
