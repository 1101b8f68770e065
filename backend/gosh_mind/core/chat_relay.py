"""
Chat Relay - orchestrates one chat exchange between a client session and the
upstream language-model provider.
"""

import asyncio
import logging
import time
import weakref
from typing import Any, List, Optional

from pydantic import ValidationError

from .errors import (
    InvalidRequestError, UpstreamError, UpstreamConfigurationError, format_validation_errors
)
from .logging_config import LoggerAdapter
from ..llm.base import LLMProvider, LLMMessage
from ..models import MAX_MESSAGE_LENGTH, ChatRequest, ChatResponse, Turn, utf16_length
from ..storage.interface import SessionStoreInterface

logger = logging.getLogger(__name__)


class ChatRelay:
    """
    Relays user turns to the upstream provider and records each exchange.

    History is persisted only after the upstream call succeeds, so a failed
    exchange leaves the stored session untouched. Exchanges for the same
    session id are serialized; different sessions run concurrently.
    """

    def __init__(
        self,
        store: SessionStoreInterface,
        provider: Optional[LLMProvider],
        max_message_length: int = MAX_MESSAGE_LENGTH,
    ):
        self.store = store
        self.provider = provider
        self.max_message_length = max_message_length
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    def validate(self, message: Any, session_id: Any) -> ChatRequest:
        """
        Validate an inbound chat request.

        Message length is counted in UTF-16 code units, matching the client.

        Raises:
            InvalidRequestError: With one entry per failing field
        """
        request = None
        errors = []
        try:
            request = ChatRequest.model_validate({"message": message, "sessionId": session_id})
        except ValidationError as e:
            errors = format_validation_errors(e.errors())

        if isinstance(message, str) and utf16_length(message) > self.max_message_length:
            errors.append({
                "loc": ["message"],
                "msg": f"String should have at most {self.max_message_length} characters",
                "type": "string_too_long",
            })

        if errors:
            raise InvalidRequestError("Invalid request data", errors=errors)
        return request

    async def handle_chat(self, message: str, session_id: str) -> ChatResponse:
        """
        Run one exchange: validate, resolve the session, call upstream, persist.

        Args:
            message: User-authored text, non-empty and at most max_message_length long
            session_id: Opaque client-generated session id

        Returns:
            ChatResponse with the assistant reply

        Raises:
            InvalidRequestError: Validation failed; no upstream call was made
            UpstreamError: Upstream failed or returned no content; nothing was persisted
        """
        request = self.validate(message, session_id)
        log = LoggerAdapter(logger, {"session_id": request.session_id})

        if self.provider is None:
            raise UpstreamConfigurationError("OPENAI_API_KEY is not configured")

        async with self._lock_for(request.session_id):
            session = await self.store.get_or_create(request.session_id)

            user_turn = Turn(role="user", content=request.message)
            history = session.messages + [user_turn]

            reply = await self._generate_reply(history, log)

            assistant_turn = Turn(role="assistant", content=reply)
            await self.store.replace_messages(request.session_id, history + [assistant_turn])

        log.info(f"Chat exchange recorded: {len(history) + 1} turns in session")
        return ChatResponse(response=reply, session_id=request.session_id)

    async def _generate_reply(self, history: List[Turn], log: LoggerAdapter) -> str:
        start_time = time.time()
        messages = [LLMMessage.text(turn.role, turn.content) for turn in history]

        try:
            result = await self.provider.generate_reply(messages)
        except UpstreamError as e:
            log.error(f"Upstream call failed via {self.provider.name}: {e}")
            raise

        if not result.content or not result.content.strip():
            log.error(f"Upstream returned no content via {self.provider.name}")
            raise UpstreamError("no response content")

        log.debug(
            f"Upstream reply received: {len(result.content)} chars",
            extra={"extra_fields": {"duration_ms": round((time.time() - start_time) * 1000, 2)}},
        )
        return result.content

    async def get_history(self, session_id: str) -> List[Turn]:
        """Turns of a session, oldest first. Unknown sessions yield an empty list."""
        session = await self.store.get(session_id)
        if session is None:
            return []
        return session.messages
