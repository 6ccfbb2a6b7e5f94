"""Request models for the arguments of the wire commands"""

from typing import Optional, Self

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from src.chess.square import Square
from src.chess.validator import MoveClaim
from src.core.exceptions import InvalidFormatError
from src.core.shared_types import Color, PieceType

# <color><kind><file><rank>-<file><rank>, optionally followed by one or two <option><color><kind> groups
MOVE_LENGTHS = (7, 10, 13)
CAPTURE_OPTION = "x"
PROMOTION_OPTION = "y"


def _is_algebraic_notation(value: str) -> bool:
    try:
        Square.from_algebraic(value)
    except ValueError:
        return False
    return True


# --- REQUEST MODELS ---
class NewGameRequest(BaseModel):
    color: Color

    @classmethod
    def from_wire(cls, argument: Optional[str]) -> Self:
        if argument is None:
            raise InvalidFormatError("New game needs a color: W or B")
        try:
            return cls(color=argument)
        except ValidationError as err:
            raise InvalidFormatError(f"Not a color: {argument!r}") from err


class DeclaredPiece(BaseModel):
    """The <color><kind> pair that follows an 'x' (capture) or 'y' (promotion) option"""

    color: Color
    kind: PieceType


class MoveRequest(BaseModel):
    color: Color
    kind: PieceType
    from_square: str
    to_square: str
    capture: Optional[DeclaredPiece] = None
    promotion: Optional[DeclaredPiece] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise ValueError(f"Cannot interpret {value!r} as a square name.")
        return value

    @classmethod
    def from_wire(cls, argument: Optional[str]) -> Self:
        """
        Decode the fixed-width move argument
        ----

        ex)
        * "WPe2-e4": white pawn from e2 to e4
        * "WQd1-d7xBP": white queen takes the black pawn on d7
        * "BPb2-a1xWRyBQ": black pawn takes the white rook on a1 and promotes to a queen
        """
        if argument is None or len(argument) not in MOVE_LENGTHS:
            raise InvalidFormatError(f"Move must be {MOVE_LENGTHS} characters long: {argument!r}")
        if argument[4] != "-":
            raise InvalidFormatError(f"Missing '-' between the squares: {argument!r}")

        options = _split_options(argument[7:])
        try:
            return cls(
                color=argument[0],
                kind=argument[1],
                from_square=argument[2:4],
                to_square=argument[5:7],
                capture=options.get(CAPTURE_OPTION),
                promotion=options.get(PROMOTION_OPTION),
            )
        except ValidationError as err:
            raise InvalidFormatError(f"Cannot decode move {argument!r}") from err

    def to_claim(self) -> MoveClaim:
        """Convert into the domain level description of the move"""
        return MoveClaim(
            color=self.color,
            kind=self.kind,
            from_square=Square.from_algebraic(self.from_square),
            to_square=Square.from_algebraic(self.to_square),
            capture=self.capture.kind if self.capture else None,
            promote_to=self.promotion.kind if self.promotion else None,
            capture_color=self.capture.color if self.capture else None,
            promotion_color=self.promotion.color if self.promotion else None,
        )


def _split_options(options: str) -> dict[str, dict[str, str]]:
    """
    Options come in groups of 3 characters. Allowed are: a capture, a promotion, or a capture followed by a promotion.
    """
    groups = [options[i : i + 3] for i in range(0, len(options), 3)]
    letters = [group[0] for group in groups]
    if letters not in ([], [CAPTURE_OPTION], [PROMOTION_OPTION], [CAPTURE_OPTION, PROMOTION_OPTION]):
        raise InvalidFormatError(f"Unknown move options: {options!r}")
    return {group[0]: {"color": group[1], "kind": group[2]} for group in groups}
