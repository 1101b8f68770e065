"""LLM module - upstream completion strategies behind one provider interface."""

from .base import LLMProvider, LLMMessage, LLMResponse
from .openai_provider import OpenAIProvider
from .assistant_provider import AssistantProvider
from .factory import create_llm_provider, create_provider_from_settings

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'LLMResponse',
    'OpenAIProvider',
    'AssistantProvider',
    'create_llm_provider',
    'create_provider_from_settings',
]
