"""
Byte-stream endpoint of a single game instance.

A write carries one command terminated by a newline, a read returns the latest reply and clears it.
"""

import logging

from src.core.shared_types import Response
from src.services.chess_service import ChessService

log = logging.getLogger(__name__)

ENCODING = "ascii"


class ChessDevice:
    def __init__(self, service: ChessService, instance_id: int = 0) -> None:
        # fail early for an instance that does not exist
        service.session(instance_id)
        self.service = service
        self.instance_id = instance_id

    def write(self, data: bytes) -> int:
        """
        Everything up to the last newline is the command. Input without a newline is rejected as malformed.

        Returns the number of bytes consumed (always all of them).
        """
        text = data.decode(ENCODING, errors="replace")
        log.debug("Writing to instance %d: %r", self.instance_id, text)
        end_of_line = text.rfind("\n")
        if end_of_line <= 0:
            self.service.reject(self.instance_id, Response.INVALID_FORMAT)
        else:
            self.service.execute(self.instance_id, text[:end_of_line])
        return len(data)

    def read(self, size: int = -1) -> bytes:
        """The latest reply (at most `size` bytes if given). An empty bytes object once it has been read."""
        reply = self.service.read_reply(self.instance_id).encode(ENCODING)
        if size >= 0:
            reply = reply[:size]
        return reply
