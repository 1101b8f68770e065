"""
Conversation Models - Defines structures for chat sessions and the relay API.
"""

from datetime import datetime, timezone
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field

MAX_MESSAGE_LENGTH = 2000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units, as counted by the browser client."""
    return len(text.encode("utf-16-le", errors="surrogatepass")) // 2


def iso_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""
    return utc_now().isoformat()


class Turn(BaseModel):
    """One message in a conversation."""
    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1)
    timestamp: str = Field(default_factory=iso_timestamp)


class Session(BaseModel):
    """A conversation identified by an opaque client-chosen session id."""
    session_id: str
    messages: List[Turn] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ChatRequest(BaseModel):
    """Body of POST /api/chat. The upper length bound is enforced by the relay."""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    session_id: str = Field(..., alias="sessionId", min_length=1)


class ChatResponse(BaseModel):
    """Reply relayed back to the client."""
    model_config = ConfigDict(populate_by_name=True)

    response: str
    session_id: str = Field(..., alias="sessionId")


class ConversationHistory(BaseModel):
    """Body of GET /api/conversation/{session_id}."""
    messages: List[Turn] = Field(default_factory=list)
