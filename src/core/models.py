"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
The domain layer (Game) converts to/from a SessionModel, and the persistence layer only ever stores SessionModels.
(Decouples the data model specific to the DB layer from the one used by the rules engine)
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Type aliases to make SessionModel easier to read
PieceColor = str
PieceRecordData = dict[str, Any]


@dataclass
class SessionModel:
    """Transport-safe representation of one game instance used between Service, DB, and Game layers."""

    status: str
    turn: PieceColor
    player_color: Optional[PieceColor]
    computer_color: Optional[PieceColor]
    pieces: list[PieceRecordData] = field(default_factory=list)
    reply: str = ""
