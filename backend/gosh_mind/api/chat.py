"""
Chat API endpoints - relay chat turns and expose per-session history.
"""

import logging
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ..core.chat_relay import ChatRelay
from ..models import ChatRequest, ChatResponse, ConversationHistory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


def get_chat_relay(request: Request) -> ChatRelay:
    """Chat relay attached to the application at creation time."""
    return request.app.state.chat_relay


@router.post("/chat", response_model=ChatResponse)
async def send_message(
    payload: ChatRequest,
    relay: ChatRelay = Depends(get_chat_relay)
):
    """
    Send a chat message and get the assistant reply.

    Args:
        payload: {message, sessionId}
        relay: Chat relay

    Returns:
        ChatResponse: {response, sessionId}
    """
    return await relay.handle_chat(payload.message, payload.session_id)


@router.get("/conversation/{session_id}", response_model=ConversationHistory)
async def get_conversation(
    session_id: str,
    relay: ChatRelay = Depends(get_chat_relay)
):
    """
    Get the message history of a session. Unknown sessions return no messages.
    """
    try:
        messages = await relay.get_history(session_id)
    except Exception as e:
        logger.error(f"Failed to retrieve conversation {session_id}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Failed to retrieve conversation history"},
        )
    return ConversationHistory(messages=messages)
