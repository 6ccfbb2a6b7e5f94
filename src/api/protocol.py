"""
The wire protocol: one command per line, a two-digit command code optionally followed by a single argument.

    00 W          --> new game, human plays white
    01            --> board snapshot
    02 WPe2-e4    --> human move
    03            --> engine move
    04            --> resign
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from src.core.exceptions import InvalidFormatError, UnknownCommandError

# No argument is ever longer than a move with both a capture and a promotion
MAX_ARGUMENT_LENGTH = 13


class CommandCode(StrEnum):
    NEW_GAME = "00"
    VIEW_BOARD = "01"
    PLAYER_MOVE = "02"
    COMPUTER_MOVE = "03"
    RESIGN = "04"


@dataclass(frozen=True)
class Command:
    code: CommandCode
    # None when no argument was given. An empty string is an argument too ("01 " is not the same as "01")
    argument: Optional[str] = None

    def assert_no_argument(self) -> None:
        if self.argument is not None:
            raise InvalidFormatError(f"Command {self.code} does not take an argument")


def parse_command(line: str) -> Command:
    """
    Split a line (without its newline) into command + argument.

    Tokens are separated by single spaces.
    """
    tokens = line.split(" ")
    if len(tokens) > 2:
        raise InvalidFormatError(f"At most one argument allowed: {line!r}")

    code = tokens[0]
    argument = tokens[1] if len(tokens) == 2 else None
    if len(code) != 2:
        raise InvalidFormatError(f"Command must be two characters: {code!r}")
    if argument is not None and len(argument) > MAX_ARGUMENT_LENGTH:
        raise InvalidFormatError(f"Argument too long: {argument!r}")

    if code not in [command.value for command in CommandCode]:
        raise UnknownCommandError(f"Unknown command: {code!r}")
    return Command(CommandCode(code), argument)
