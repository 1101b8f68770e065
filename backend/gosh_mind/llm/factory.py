"""
LLM Provider Factory - Creates the configured upstream strategy.
"""

from typing import Optional
from .base import LLMProvider
from .openai_provider import OpenAIProvider
from .assistant_provider import AssistantProvider


def create_llm_provider(
    strategy: str = "completion",
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    **kwargs
) -> Optional[LLMProvider]:
    """
    Create an upstream provider instance based on configuration.

    Args:
        strategy: "completion" (direct chat/completions) or "assistant" (thread/run polling)
        api_key: Upstream API credential
        model: Model name (uses provider default if not specified)
        base_url: Custom base URL (uses provider default if not specified)
        **kwargs: Additional strategy-specific parameters

    Returns:
        LLMProvider instance, or None if api_key is not configured
    """
    if strategy not in ("completion", "assistant"):
        raise ValueError(f"Unsupported upstream strategy: {strategy}")

    if not api_key:
        return None

    params = {"api_key": api_key}
    if model:
        params["model"] = model
    if base_url:
        params["base_url"] = base_url
    params.update(kwargs)

    if strategy == "completion":
        return OpenAIProvider(**params)
    return AssistantProvider(**params)


def create_provider_from_settings(config) -> Optional[LLMProvider]:
    """Build the provider described by a Settings object."""
    if config.upstream_strategy == "assistant":
        extra = {
            "assistant_id": config.openai_assistant_id,
            "poll_interval": config.poll_interval,
            "max_poll_attempts": config.max_poll_attempts,
        }
    else:
        extra = {
            "system_prompt": config.system_prompt,
            "temperature": config.llm_temperature,
            "max_tokens": config.llm_max_tokens,
        }
    return create_llm_provider(
        strategy=config.upstream_strategy,
        api_key=config.openai_api_key,
        model=config.llm_model,
        base_url=config.llm_base_url,
        timeout=config.llm_timeout,
        log_calls=config.log_llm_calls,
        **extra,
    )
