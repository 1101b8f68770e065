"""
OpenAI Chat Completions Provider.
Sends the whole conversation in one stateless request and gets the reply back
in a single round trip.
"""

import httpx
import logging
import time
from typing import List, Dict, Any

from .base import LLMProvider, LLMMessage, LLMResponse
from ..config.settings import DEFAULT_SYSTEM_PROMPT
from ..core.errors import UpstreamError

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """
    Direct completion strategy against an OpenAI-compatible chat/completions endpoint.
    The fixed system instruction is prepended to every request.
    """

    name = "completion"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout: float = 60.0,
        log_calls: bool = True,
    ):
        super().__init__(api_key, model, base_url, timeout=timeout, log_calls=log_calls)
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_payload(self, messages: List[LLMMessage]) -> Dict[str, Any]:
        conversation = [LLMMessage.text("system", self.system_prompt)] + list(messages)
        return {
            "model": self.model,
            "messages": self._format_messages(conversation),
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    async def generate_reply(self, messages: List[LLMMessage]) -> LLMResponse:
        """Send the conversation to the Chat Completions endpoint."""
        start_time = time.time()
        payload = self.build_payload(messages)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Upstream completion starting: model={self.model}, "
                f"temperature={self.temperature}, {len(messages)} messages"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                data = await self._request(client, "POST", "/chat/completions", payload=payload)

            try:
                content = data["choices"][0]["message"].get("content") or ""
            except (KeyError, IndexError, TypeError, AttributeError) as e:
                raise UpstreamError("Upstream completion returned no choices") from e

            usage = data.get("usage") or {}
            duration_ms = (time.time() - start_time) * 1000

            if self.log_calls:
                logger.info(
                    "Upstream completion finished",
                    extra={"extra_fields": {
                        "strategy": self.name,
                        "model": data.get("model", self.model),
                        "prompt_tokens": usage.get("prompt_tokens", 0),
                        "completion_tokens": usage.get("completion_tokens", 0),
                        "total_tokens": usage.get("total_tokens", 0),
                        "duration_ms": round(duration_ms, 2),
                    }}
                )

            return LLMResponse(
                content=content,
                model=data.get("model", self.model),
                usage=usage,
                raw=data,
            )
        except UpstreamError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Upstream completion failed: {e}",
                extra={"extra_fields": {
                    "strategy": self.name,
                    "model": self.model,
                    "status_code": e.status_code,
                    "duration_ms": round(duration_ms, 2),
                    "error": str(e),
                }}
            )
            raise
