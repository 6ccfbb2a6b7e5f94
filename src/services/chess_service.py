"""Orchestration of communication from the transport to the business logic and persistence layers (and the reverse direction)."""

import logging
import threading
from typing import Optional

from src.api.models import MoveRequest, NewGameRequest
from src.api.protocol import Command, CommandCode, parse_command
from src.chess.game import Game
from src.core.exceptions import GameError, SessionNotFoundError
from src.core.shared_types import Response
from src.db.repository import SessionRepository

log = logging.getLogger(__name__)


class GameSession:
    """
    One game instance: the game itself, the last reply, and the lock that guards both.

    Whoever holds the lock may read and change the game. A command holds it from start to finish,
    so nobody ever sees a move that is only half applied.
    """

    def __init__(self, instance_id: int, game: Optional[Game] = None, reply: Optional[str] = None) -> None:
        self.instance_id = instance_id
        self.game = game if game is not None else Game.no_game()
        self.reply = reply if reply is not None else Response.NO_MESSAGE.to_line()
        self.lock = threading.Lock()


class ChessService:
    """Orchestration of layers for a fixed pool of independent game instances."""

    def __init__(self, instances: int = 1, repository: Optional[SessionRepository] = None) -> None:
        self.repo = repository
        # The repository is shared by all instances, the session locks alone do not serialise its use
        self._repo_lock = threading.Lock()
        self.sessions = [self._load_session(instance_id) for instance_id in range(instances)]

    # -- Transport facing API ---
    def execute(self, instance_id: int, line: str) -> str:
        """
        Run a single command line (newline already stripped) and store the reply for the next read.

        Every rejected command leaves the game untouched and is reported through the response vocabulary.
        """
        session = self.session(instance_id)
        with session.lock:
            try:
                command = parse_command(line)
                reply = self._dispatch(session.game, command)
            except GameError as err:
                log.debug("Instance %d rejected %r: %s", instance_id, line, err)
                reply = err.response.to_line()
            session.reply = reply
            self._save_session(session)
            return reply

    def reject(self, instance_id: int, response: Response) -> str:
        """Record a reply for input that never made it to a command (ex. no newline)"""
        session = self.session(instance_id)
        with session.lock:
            session.reply = response.to_line()
            self._save_session(session)
            return session.reply

    def read_reply(self, instance_id: int) -> str:
        """Most recent reply. Reading clears it."""
        session = self.session(instance_id)
        with session.lock:
            reply, session.reply = session.reply, ""
            self._save_session(session)
            return reply

    def session(self, instance_id: int) -> GameSession:
        if not 0 <= instance_id < len(self.sessions):
            raise SessionNotFoundError(
                f"No game instance {instance_id}. Available: 0-{len(self.sessions) - 1}"
            )
        return self.sessions[instance_id]

    # -- Command logic --
    def _dispatch(self, game: Game, command: Command) -> str:
        match command.code:
            case CommandCode.NEW_GAME:
                request = NewGameRequest.from_wire(command.argument)
                return game.new_game(request.color).to_line()
            case CommandCode.VIEW_BOARD:
                command.assert_no_argument()
                return game.view_board()
            case CommandCode.PLAYER_MOVE:
                move = MoveRequest.from_wire(command.argument)
                return game.player_move(move.to_claim()).to_line()
            case CommandCode.COMPUTER_MOVE:
                command.assert_no_argument()
                return game.computer_move().to_line()
            case CommandCode.RESIGN:
                command.assert_no_argument()
                return game.resign().to_line()

    # -- Internal helpers --
    def _load_session(self, instance_id: int) -> GameSession:
        """Pick up where a previous run left off, if a repository is configured and has a record."""
        if self.repo is None:
            return GameSession(instance_id)
        model = self.repo.get_session(instance_id)
        if model is None:
            return GameSession(instance_id)
        log.info("Restored game instance %d (status: %s)", instance_id, model.status)
        return GameSession(instance_id, Game.from_model(model), model.reply)

    def _save_session(self, session: GameSession) -> None:
        if self.repo is None:
            return
        with self._repo_lock:
            self.repo.save_session(session.instance_id, session.game.to_model(session.reply))
