"""Protocol repository (can implement later for SQL Alchemy / simple file storage etc.)"""

from typing import Protocol

from src.core.models import SessionModel


class SessionRepository(Protocol):
    """Persistence layer orchestration"""

    def get_session(self, instance_id: int) -> SessionModel | None:
        """Get the stored state of a game instance, if record exists."""
        ...

    def save_session(self, instance_id: int, session: SessionModel) -> SessionModel:
        """Create or overwrite the record of a game instance."""
        ...

    def delete_session(self, instance_id: int) -> SessionModel | None:
        """Remove a game instance's record."""
        ...
