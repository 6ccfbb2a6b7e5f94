"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    NO_GAME = "no game"
    IN_PROGRESS = "in progress"
    GAME_OVER = "game over"


# --- Values are the letters used on the wire (move specs and board snapshots)


class Color(StrEnum):
    WHITE = "W"
    BLACK = "B"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "P"
    ROOK = "R"
    KNIGHT = "N"
    BISHOP = "B"
    QUEEN = "Q"
    KING = "K"


class Response(StrEnum):
    """Everything a client can read back from a game instance (besides a board snapshot)"""

    OK = "OK"
    CHECK = "CHECK"
    MATE = "MATE"
    ILLEGAL_MOVE = "ILLMOVE"
    NO_GAME = "NOGAME"
    OUT_OF_TURN = "OOT"
    INVALID_FORMAT = "INVFMT"
    UNKNOWN_COMMAND = "UNKCMD"
    NO_MESSAGE = "NOMSG"

    def to_line(self) -> str:
        return f"{self.value}\n"
