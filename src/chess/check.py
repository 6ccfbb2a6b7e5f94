"""
Check / Checkmate detection and the engine's move-selection policy.

Both reuse the raw candidate moves of the move generator. Positions are explored by applying a move on the
board itself and taking it back afterwards (no copies of the board are made).
"""

import logging
from typing import Optional

from src.chess.board import AppliedMove, Board
from src.chess.moves import generate_moves
from src.chess.pieces import PROMOTION_RANK, king_index, piece_indices
from src.chess.square import Square
from src.core.shared_types import Color, PieceType

log = logging.getLogger(__name__)


def in_check(board: Board, color: Color) -> bool:
    """
    Is the king of `color` attacked?
    ----

    Walk over the 16 opposing pieces (fixed index order). Any living one with a candidate move onto the king's square
    gives check. No recursion: the opposing candidates are not tested for their own legality.
    """
    king_square = board.pieces[king_index(color)].square
    for index in piece_indices(color.opponent):
        piece = board.pieces[index]
        if not piece.alive:
            continue
        if king_square in generate_moves(piece, board):
            return True
    return False


def automatic_promotion(board: Board, index: int, to_square: Square) -> Optional[PieceType]:
    """The engine always promotes to a queen."""
    piece = board.pieces[index]
    if piece.kind == PieceType.PAWN and to_square.rank == PROMOTION_RANK[piece.color]:
        return PieceType.QUEEN
    return None


def search_move(board: Board, color: Color, commit: bool) -> Optional[AppliedMove]:
    """
    First legal move for `color`
    ----

    1. pieces in fixed index order, candidates in generation order
    2. tentatively play the candidate (pawns reaching the last rank become queens)
    3. the first one that leaves the own king out of check is the result

    * commit=False: the move is taken back again, so this only tests whether a legal move exists.
    * commit=True: the move stays on the board.

    Returns None if there is no legal move at all (checkmate, or stalemate when not in check).
    NOTE: deterministic on purpose. Same position, same move.
    """
    for index in piece_indices(color):
        piece = board.pieces[index]
        if not piece.alive:
            continue

        for to_square in generate_moves(piece, board):
            promote_to = automatic_promotion(board, index, to_square)
            applied = board.apply_move(index, to_square, promote_to)
            if in_check(board, color):
                board.undo_move(applied)
                continue

            if not commit:
                board.undo_move(applied)
            else:
                log.debug(
                    "%s plays piece %d %s-%s",
                    color.name,
                    index,
                    applied.from_square.to_algebraic(),
                    to_square.to_algebraic(),
                )
            return applied
    return None


def has_legal_move(board: Board, color: Color) -> bool:
    return search_move(board, color, commit=False) is not None
