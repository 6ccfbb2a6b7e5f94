"""Implementation of (Session)Repository using SQLAlchemy"""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import SessionModel
from src.db.schema import DBSession


class SQLSessionRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_session(self, instance_id: int) -> SessionModel | None:
        """Get the stored state of a game instance, if record exists."""
        session_db = self._fetch_session(instance_id)
        if session_db:
            return self._to_model(session_db)
        return None

    def save_session(self, instance_id: int, session: SessionModel) -> SessionModel:
        """Create or overwrite the record of a game instance."""
        session_db = self._fetch_session(instance_id)
        if session_db is None:
            session_db = DBSession(instance_id=instance_id)
            self.db.add(session_db)

        session_db.status = session.status
        session_db.turn = session.turn
        session_db.player_color = session.player_color
        session_db.computer_color = session.computer_color
        # assign a fresh list, so the JSON column notices the change
        session_db.pieces = [dict(record) for record in session.pieces]
        session_db.reply = session.reply
        self._commit()
        self.db.refresh(session_db)
        return self._to_model(session_db)

    def delete_session(self, instance_id: int) -> SessionModel | None:
        """Remove a game instance's record."""
        session_db = self._fetch_session(instance_id)
        if not session_db:
            return None
        session_model = self._to_model(session_db)
        self.db.delete(session_db)
        self._commit()
        return session_model

    def _fetch_session(self, instance_id: int) -> DBSession | None:
        query = select(DBSession).where(DBSession.instance_id == instance_id)
        return self.db.scalar(query)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as err:
            self.db.rollback()
            raise RepositoryError(f"Could not store session: {err}") from err

    def _to_model(self, session_db: DBSession) -> SessionModel:
        """Convert SQLAlchemy model to data transfer model."""
        return SessionModel(
            status=session_db.status,
            turn=session_db.turn,
            player_color=session_db.player_color,
            computer_color=session_db.computer_color,
            pieces=list(session_db.pieces),
            reply=session_db.reply,
        )
