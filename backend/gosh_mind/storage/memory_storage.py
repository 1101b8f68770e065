"""
In-Memory Session Store Implementation.
Sessions live for the lifetime of the process: no persistence, no eviction.
"""

import logging
from typing import Dict, List, Optional

from .interface import SessionStoreInterface
from ..core.errors import DuplicateSessionError, SessionNotFoundError
from ..models import Session, Turn
from ..models.conversation import utc_now

logger = logging.getLogger(__name__)


class InMemorySessionStore(SessionStoreInterface):
    """
    Dict-backed session store.
    Returns deep copies so callers cannot mutate stored state.
    """

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    async def get(self, session_id: str) -> Optional[Session]:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        return session.model_copy(deep=True)

    async def create(self, session_id: str) -> Session:
        if session_id in self._sessions:
            raise DuplicateSessionError(session_id)

        now = utc_now()
        session = Session(session_id=session_id, created_at=now, updated_at=now)
        self._sessions[session_id] = session
        logger.debug(f"Session created: {session_id}")
        return session.model_copy(deep=True)

    async def replace_messages(self, session_id: str, messages: List[Turn]) -> Session:
        existing = self._sessions.get(session_id)
        if existing is None:
            raise SessionNotFoundError(session_id)

        updated = existing.model_copy(update={
            "messages": [turn.model_copy() for turn in messages],
            "updated_at": utc_now(),
        })
        self._sessions[session_id] = updated
        return updated.model_copy(deep=True)

    async def count(self) -> int:
        return len(self._sessions)
