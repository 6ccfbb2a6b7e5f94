"""
Custom exceptions.

Every rejected command maps onto exactly one line of the response vocabulary, so each
exception class carries the Response it should be reported as.
"""

from src.core.shared_types import Response


class GameError(Exception):
    """Top-level exception for anything that makes the engine reject a command."""

    response: Response = Response.INVALID_FORMAT


class InvalidFormatError(GameError):
    """Malformed command or argument."""

    response = Response.INVALID_FORMAT


class UnknownCommandError(GameError):
    response = Response.UNKNOWN_COMMAND


class IllegalMoveError(GameError):
    """Well-formed move that breaks the movement or check rules."""

    response = Response.ILLEGAL_MOVE


class GameStateError(GameError):
    """Command does not fit the current state of the game."""

    response = Response.NO_GAME


class NoGameError(GameStateError):
    response = Response.NO_GAME


class NotYourTurnError(GameStateError):
    response = Response.OUT_OF_TURN


class MoveGenerationError(Exception):
    """A piece produced more candidate moves than the candidate buffer can hold. Should never happen."""


class RepositoryError(Exception):
    """Persistence layer could not load or store a session."""


class SessionNotFoundError(Exception):
    """No game instance with the requested id."""
