"""
Chess engine console
====================

Play against the engine through the wire protocol, one command per line:

    00 W          start a new game as white (00 B: as black)
    01            show the board
    02 WPe2-e4    make a move
    03            let the engine move
    04            resign

Usage::

    chess-device --instance 0 --log-level INFO
    chess-device --database-url sqlite:///chess.db   # keep games between runs
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from pydantic import ValidationError

from src.core.config import Settings
from src.db.database import create_session_factory
from src.db.sql_repository import SQLSessionRepository
from src.services.chess_service import ChessService
from src.services.device import ChessDevice

log = logging.getLogger("chess_device")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chess-device",
        description="Play chess against the engine, one protocol command per line.",
    )
    parser.add_argument("--instance", type=int, default=0, help="Game instance to talk to")
    parser.add_argument("--instances", type=int, default=None, help="Size of the instance pool")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy URL to persist sessions")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Environment first, command line flags override"""
    settings = Settings.from_env()
    overrides = {
        "instances": args.instances,
        "database_url": args.database_url,
        "log_level": args.log_level,
    }
    return Settings.model_validate(
        settings.model_dump() | {key: value for key, value in overrides.items() if value is not None}
    )


def build_service(settings: Settings) -> ChessService:
    repository = None
    if settings.database_url:
        session_factory = create_session_factory(settings.database_url)
        repository = SQLSessionRepository(session_factory())
        log.info("Persisting sessions to %s", settings.database_url)
    return ChessService(instances=settings.instances, repository=repository)


def run(device: ChessDevice, stdin: TextIO, stdout: TextIO) -> None:
    """Forward every input line to the device and print what it answers"""
    for line in stdin:
        if not line.endswith("\n"):
            line += "\n"
        device.write(line.encode("ascii", errors="replace"))
        stdout.write(device.read().decode("ascii"))
        stdout.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as err:
        parser.error(str(err))

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    service = build_service(settings)
    if not 0 <= args.instance < settings.instances:
        log.error("Instance %d not in pool of %d", args.instance, settings.instances)
        return 1

    device = ChessDevice(service, args.instance)
    run(device, sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
