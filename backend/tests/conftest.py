"""
Shared test fixtures and configuration.
"""

import pytest
import os
from unittest.mock import AsyncMock

# Set test environment variables before importing app modules
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")
os.environ.setdefault("UPSTREAM_STRATEGY", "completion")

from gosh_mind.core.chat_relay import ChatRelay  # noqa: E402
from gosh_mind.llm.base import LLMProvider, LLMResponse  # noqa: E402
from gosh_mind.storage import InMemorySessionStore  # noqa: E402


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def provider():
    """Upstream provider mock that answers every exchange with "Hi there"."""
    mock_provider = AsyncMock(spec=LLMProvider)
    mock_provider.name = "mock"
    mock_provider.generate_reply.return_value = LLMResponse(content="Hi there", model="test")
    return mock_provider


@pytest.fixture
def relay(store, provider):
    return ChatRelay(store, provider)
