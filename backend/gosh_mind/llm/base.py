"""
LLM Provider Base - Abstract base for upstream completion strategies.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field

import httpx

from ..core.errors import UpstreamError

logger = logging.getLogger(__name__)


@dataclass
class LLMMessage:
    """A message sent to the upstream provider."""
    role: str  # "system", "user", "assistant"
    content: str

    @staticmethod
    def text(role: str, text: str) -> "LLMMessage":
        """Create a text message."""
        return LLMMessage(role=role, content=text)


@dataclass
class LLMResponse:
    """Reply from an upstream provider."""
    content: str
    model: str = ""
    usage: Dict[str, int] = field(default_factory=dict)
    raw: Optional[Dict[str, Any]] = None


class LLMProvider(ABC):
    """
    Abstract base class for upstream providers.
    Each strategy turns a full conversation history into one assistant reply.
    """

    name = "base"

    def __init__(self, api_key: str, model: str, base_url: str,
                 timeout: float = 60.0, log_calls: bool = True):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.log_calls = log_calls

    @abstractmethod
    async def generate_reply(self, messages: List[LLMMessage]) -> LLMResponse:
        """
        Produce the assistant reply for a conversation.

        Args:
            messages: Full conversation history, oldest first

        Returns:
            LLMResponse with the reply text (may be empty; callers decide)

        Raises:
            UpstreamError: On transport failure, error status or malformed response
        """
        pass

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _format_messages(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        """Convert LLMMessage list to API-compatible format."""
        return [{"role": m.role, "content": m.content} for m in messages]

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send one request and return its JSON body, translating failures to UpstreamError."""
        url = f"{self.base_url}{path}"
        try:
            if method == "GET":
                resp = await client.get(url, params=params, headers=self._get_headers())
            else:
                resp = await client.post(url, json=payload, headers=self._get_headers())
            logger.debug(f"Upstream {method} {path} -> {resp.status_code}")
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Upstream {method} {path} failed: {_error_detail(e.response)}",
                status_code=e.response.status_code,
            ) from e
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Upstream {method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Upstream {method} {path} failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(f"Upstream {method} {path} returned malformed JSON") from e
        if not isinstance(data, dict):
            raise UpstreamError(f"Upstream {method} {path} returned an unexpected payload")
        return data


def _error_detail(response: httpx.Response) -> str:
    """Pull the provider's error message out of an error response."""
    try:
        body = response.json()
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
    except ValueError:
        pass
    return response.text[:500] or response.reason_phrase
