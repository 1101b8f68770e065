"""
Session Store Interface - Abstract base class for session history storage.
This interface lets a persistent backend replace the in-memory store without
touching the chat relay.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.errors import DuplicateSessionError
from ..models import Session, Turn


class SessionStoreInterface(ABC):
    """
    Abstract store that owns all Session records.
    Callers never mutate a Session directly, only through replace_messages.
    """

    @abstractmethod
    async def get(self, session_id: str) -> Optional[Session]:
        """
        Look up a session.

        Args:
            session_id: Opaque client-generated session id

        Returns:
            Optional[Session]: The session, or None if it does not exist
        """
        pass

    @abstractmethod
    async def create(self, session_id: str) -> Session:
        """
        Create an empty session.

        Args:
            session_id: Opaque client-generated session id

        Returns:
            Session: The new session

        Raises:
            DuplicateSessionError: If the session already exists
        """
        pass

    @abstractmethod
    async def replace_messages(self, session_id: str, messages: List[Turn]) -> Session:
        """
        Overwrite the whole message sequence of a session and bump updated_at.

        Args:
            session_id: Session id
            messages: Full new message sequence

        Returns:
            Session: The updated session

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of stored sessions."""
        pass

    async def get_or_create(self, session_id: str) -> Session:
        """Return the existing session or create it. Re-creation is idempotent."""
        session = await self.get(session_id)
        if session is not None:
            return session
        try:
            return await self.create(session_id)
        except DuplicateSessionError:
            return await self.get(session_id)
