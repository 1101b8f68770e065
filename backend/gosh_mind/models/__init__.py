"""Models module."""

from .conversation import (
    MAX_MESSAGE_LENGTH, Turn, Session, ChatRequest, ChatResponse, ConversationHistory,
    utf16_length
)

__all__ = [
    'MAX_MESSAGE_LENGTH', 'Turn', 'Session', 'ChatRequest', 'ChatResponse',
    'ConversationHistory', 'utf16_length'
]
