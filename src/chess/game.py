"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is the turn state machine: it decides whose turn it is, lets the validator judge the human's moves,
lets the engine pick its own moves, and derives the outcome of every move (ok / check / mate).
"""

import logging
from dataclasses import dataclass
from typing import Optional, Self

from src.chess.board import Board
from src.chess.check import has_legal_move, in_check, search_move
from src.chess.validator import MoveClaim, validate_move
from src.core.exceptions import (
    GameStateError,
    InvalidFormatError,
    NoGameError,
    NotYourTurnError,
)
from src.core.models import SessionModel
from src.core.shared_types import Color, Response, Status

log = logging.getLogger(__name__)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    status: Status
    turn: Color
    player_color: Optional[Color] = None
    computer_color: Optional[Color] = None

    @classmethod
    def no_game(cls) -> Self:
        """State of a game instance before anyone started a game on it"""
        return cls(board=Board.empty(), status=Status.NO_GAME, turn=Color.WHITE)

    @classmethod
    def from_model(cls, model: SessionModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        if model.status not in [status.value for status in Status]:
            raise GameStateError(
                f"Invalid status: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )
        board = Board.from_records(model.pieces) if model.pieces else Board.empty()
        return cls(
            board=board,
            status=Status(model.status),
            turn=Color(model.turn),
            player_color=Color(model.player_color) if model.player_color else None,
            computer_color=Color(model.computer_color) if model.computer_color else None,
        )

    def to_model(self, reply: str = "") -> SessionModel:
        """Encode back into a format the Service layer uses"""
        return SessionModel(
            status=self.status.value,
            turn=self.turn.value,
            player_color=self.player_color.value if self.player_color else None,
            computer_color=self.computer_color.value if self.computer_color else None,
            pieces=self.board.to_records(),
            reply=reply,
        )

    @property
    def in_progress(self) -> bool:
        return self.status == Status.IN_PROGRESS

    def new_game(self, color: Color) -> Response:
        """
        Start over with the human playing `color`.

        Allowed in any state. White always moves first, so if the human picked black, the engine has to be asked for its move.
        """
        self.board = Board.starting_position()
        self.status = Status.IN_PROGRESS
        self.turn = Color.WHITE
        self.player_color = color
        self.computer_color = color.opponent
        log.info("New game started. Player plays %s", color.name)
        return Response.OK

    def view_board(self) -> str:
        """Board snapshot. Allowed in any state, never changes anything."""
        return self.board.snapshot()

    def player_move(self, claim: MoveClaim) -> Response:
        """
        The human attempts a move
        -----

        1. make sure the game is in progress
        2. the declared colors must match who is playing what (otherwise the command was not well-formed)
        3. make sure it is the player's turn
        4. validate + play the move (IllegalMoveError leaves the board untouched)
        5. hand the turn to the engine and see if the engine is in check / checkmate
        """
        self._assert_in_progress()
        self._assert_declared_colors(claim)
        self._assert_turn(self.player_color)

        validate_move(self.board, claim)
        log.debug(
            "Player moved %s-%s",
            claim.from_square.to_algebraic(),
            claim.to_square.to_algebraic(),
        )

        self.turn = self.computer_color
        return self._outcome_for(self.computer_color)

    def computer_move(self) -> Response:
        """
        The engine makes its move
        -----

        Always the first legal move it finds (see `search_move()`).
        If no move is found the reply is still OK: the previous move would already have been reported as mate.
        """
        self._assert_in_progress()
        self._assert_turn(self.computer_color)

        applied = search_move(self.board, self.computer_color, commit=True)
        if applied is None:
            log.warning("Engine (%s) has no legal move", self.computer_color.name)

        self.turn = self.player_color
        return self._outcome_for(self.player_color)

    def resign(self) -> Response:
        """The human gives up. Only on the human's own turn."""
        self._assert_in_progress()
        self._assert_turn(self.player_color)
        self._change_status(Status.GAME_OVER)
        log.info("Player (%s) resigned", self.player_color.name)
        return Response.OK

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        if not self.in_progress:
            raise NoGameError(f"No game in progress. status: {self.status}")

    def _assert_turn(self, color: Optional[Color]) -> None:
        if self.turn != color:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.turn.name} to make a move first."
            )

    def _assert_declared_colors(self, claim: MoveClaim) -> None:
        """You move (and promote into) your own pieces, and can only capture the engine's pieces."""
        if claim.color != self.player_color:
            raise InvalidFormatError(f"Player plays {self.player_color}, not {claim.color}")
        if claim.capture is not None and claim.capture_color != self.computer_color:
            raise InvalidFormatError(
                f"Can only capture {self.computer_color} pieces, not {claim.capture_color}"
            )
        if claim.promote_to is not None and claim.promotion_color != self.player_color:
            raise InvalidFormatError(
                f"Can only promote into {self.player_color} pieces, not {claim.promotion_color}"
            )

    def _outcome_for(self, color: Color) -> Response:
        """
        Performs checks to see if the side to move (`color`) is in check, or even checkmated.

        Checkmate ends the game. A side without legal moves that is NOT in check (stalemate) is not detected.
        """
        if not in_check(self.board, color):
            return Response.OK

        if has_legal_move(self.board, color):
            return Response.CHECK

        self._change_status(Status.GAME_OVER)
        log.info("Checkmate. %s has been mated", color.name)
        return Response.MATE

    def _change_status(self, new_status: Status) -> None:
        self.status = new_status
