"""Unit tests for /src/chess/game.py"""

from typing import Optional

import pytest

from src.chess.board import Board
from src.chess.game import Game
from src.chess.square import Square
from src.chess.validator import MoveClaim
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidFormatError,
    NoGameError,
    NotYourTurnError,
)
from src.core.models import SessionModel
from src.core.shared_types import Color, PieceType, Response, Status


def claim(
    move: str,
    color: Color = Color.WHITE,
    kind: PieceType = PieceType.PAWN,
    capture: Optional[tuple[Color, PieceType]] = None,
    promotion: Optional[tuple[Color, PieceType]] = None,
) -> MoveClaim:
    return MoveClaim(
        color=color,
        kind=kind,
        from_square=Square.from_algebraic(move[:2]),
        to_square=Square.from_algebraic(move[2:]),
        capture=capture[1] if capture else None,
        capture_color=capture[0] if capture else None,
        promote_to=promotion[1] if promotion else None,
        promotion_color=promotion[0] if promotion else None,
    )


def game_in_position(
    placements: dict[int, str], turn: Color, player_color: Color = Color.WHITE
) -> Game:
    return Game(
        board=Board.from_placements(placements),
        status=Status.IN_PROGRESS,
        turn=turn,
        player_color=player_color,
        computer_color=player_color.opponent,
    )


@pytest.fixture
def white_game() -> Game:
    game = Game.no_game()
    game.new_game(Color.WHITE)
    return game


@pytest.fixture
def black_game() -> Game:
    game = Game.no_game()
    game.new_game(Color.BLACK)
    return game


# -- CREATION LOGIC --
def test_no_game() -> None:
    game = Game.no_game()
    assert game.status == Status.NO_GAME
    assert not game.in_progress
    assert game.view_board() == "**" * 64 + "\n"


@pytest.mark.parametrize("player_color", [Color.WHITE, Color.BLACK])
def test_creating_new_game(player_color: Color) -> None:
    """White always moves first, whatever the player picked"""
    game = Game.no_game()
    assert game.new_game(player_color) == Response.OK
    assert game.status == Status.IN_PROGRESS
    assert game.turn == Color.WHITE
    assert game.player_color == player_color
    assert game.computer_color == player_color.opponent
    assert game.board == Board.starting_position()


def test_new_game_resets_everything(white_game: Game) -> None:
    white_game.player_move(claim("e2e4"))
    white_game.new_game(Color.BLACK)
    assert white_game.board == Board.starting_position()
    assert white_game.turn == Color.WHITE
    assert white_game.player_color == Color.BLACK


def test_model_roundtrip(white_game: Game) -> None:
    white_game.player_move(claim("e2e4"))
    model = white_game.to_model(reply="OK\n")
    assert model.status == "in progress"
    assert model.turn == "B"
    assert model.player_color == "W"
    assert model.computer_color == "B"
    assert len(model.pieces) == 32
    assert Game.from_model(model) == white_game


def test_no_game_model_roundtrip() -> None:
    game = Game.no_game()
    assert Game.from_model(game.to_model()) == game


def test_invalid_status_name() -> None:
    model = SessionModel(status="not_existing", turn="W", player_color=None, computer_color=None)
    with pytest.raises(GameStateError):
        Game.from_model(model)


# -- PLAYER MOVES --
def test_player_move(white_game: Game) -> None:
    assert white_game.player_move(claim("e2e4")) == Response.OK
    assert white_game.turn == Color.BLACK
    assert white_game.board.is_consistent()


def test_player_move_without_game() -> None:
    with pytest.raises(NoGameError):
        Game.no_game().player_move(claim("e2e4"))


def test_player_move_out_of_turn(black_game: Game) -> None:
    with pytest.raises(NotYourTurnError):
        black_game.player_move(claim("e7e5", color=Color.BLACK))


def test_player_moves_computer_pieces(white_game: Game) -> None:
    """Declared colors that do not fit the players make the command malformed"""
    white_game.player_move(claim("e2e4"))
    with pytest.raises(InvalidFormatError):
        white_game.player_move(claim("e7e5", color=Color.BLACK))


def test_capture_of_own_color_is_malformed() -> None:
    game = game_in_position({15: "e1", 31: "h5", 14: "d1", 19: "d7"}, turn=Color.WHITE)
    with pytest.raises(InvalidFormatError):
        game.player_move(
            claim("d1d7", kind=PieceType.QUEEN, capture=(Color.WHITE, PieceType.PAWN))
        )


def test_promotion_into_computer_color_is_malformed() -> None:
    game = game_in_position({15: "e1", 31: "h5", 0: "a7"}, turn=Color.WHITE)
    with pytest.raises(InvalidFormatError):
        game.player_move(claim("a7a8", promotion=(Color.BLACK, PieceType.QUEEN)))


def test_illegal_move_keeps_state(white_game: Game) -> None:
    before = white_game.board.to_records()
    with pytest.raises(IllegalMoveError):
        white_game.player_move(claim("e2e5"))
    assert white_game.turn == Color.WHITE
    assert white_game.board.to_records() == before


def test_player_gives_check() -> None:
    """Black king h8 can escape to g7"""
    game = game_in_position({15: "e1", 31: "h8", 23: "h7", 8: "a1"}, turn=Color.WHITE)
    assert game.player_move(claim("a1a8", kind=PieceType.ROOK)) == Response.CHECK
    assert game.status == Status.IN_PROGRESS
    assert game.turn == Color.BLACK


def test_player_gives_checkmate() -> None:
    """Back rank mate: the black king is stuck behind its own pawns"""
    game = game_in_position(
        {15: "e1", 31: "h8", 22: "g7", 23: "h7", 8: "a1"}, turn=Color.WHITE
    )
    assert game.player_move(claim("a1a8", kind=PieceType.ROOK)) == Response.MATE
    assert game.status == Status.GAME_OVER

    with pytest.raises(NoGameError):
        game.computer_move()
    with pytest.raises(NoGameError):
        game.resign()


# -- COMPUTER MOVES --
def test_computer_move_out_of_turn(white_game: Game) -> None:
    with pytest.raises(NotYourTurnError):
        white_game.computer_move()


def test_computer_move_without_game() -> None:
    with pytest.raises(NoGameError):
        Game.no_game().computer_move()


def test_computer_replies(white_game: Game) -> None:
    """Black's first legal move is always a7-a5"""
    white_game.player_move(claim("e2e4"))
    assert white_game.computer_move() == Response.OK
    assert white_game.turn == Color.WHITE
    assert white_game.board.piece_at(Square.from_algebraic("a5")).to_snapshot() == "BP"


def test_computer_opens_as_white(black_game: Game) -> None:
    assert black_game.computer_move() == Response.OK
    assert black_game.turn == Color.BLACK
    assert black_game.board.occupant(Square.from_algebraic("a4")) == 0


def test_computer_gives_checkmate() -> None:
    """Rook takes the knight on b1 and mates the king on h1"""
    game = game_in_position(
        {15: "h1", 6: "g2", 7: "h2", 10: "b1", 24: "a1", 31: "a8"}, turn=Color.BLACK
    )
    assert game.computer_move() == Response.MATE
    assert game.status == Status.GAME_OVER
    assert not game.board.pieces[10].alive
    assert game.board.occupant(Square.from_algebraic("b1")) == 24


def test_computer_without_legal_move_still_reports_ok() -> None:
    """Stalemated engine: nothing moves, the turn passes anyway"""
    game = game_in_position({15: "h1", 31: "a8", 14: "b6"}, turn=Color.BLACK)
    before = game.board.to_records()
    assert game.computer_move() == Response.OK
    assert game.turn == Color.WHITE
    assert game.board.to_records() == before


# -- RESIGN / VIEW --
def test_resign(white_game: Game) -> None:
    board_before = white_game.board.to_records()
    assert white_game.resign() == Response.OK
    assert white_game.status == Status.GAME_OVER
    assert white_game.board.to_records() == board_before


def test_resign_out_of_turn(black_game: Game) -> None:
    with pytest.raises(NotYourTurnError):
        black_game.resign()


def test_resign_without_game() -> None:
    with pytest.raises(NoGameError):
        Game.no_game().resign()


def test_view_board_is_idempotent(white_game: Game) -> None:
    white_game.player_move(claim("e2e4"))
    assert white_game.view_board() == white_game.view_board()


def test_view_board_after_game_over(white_game: Game) -> None:
    white_game.player_move(claim("e2e4"))
    white_game.computer_move()
    snapshot = white_game.view_board()
    white_game.resign()
    assert white_game.view_board() == snapshot
