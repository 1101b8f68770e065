"""
OpenAI Assistants Provider.
Runs each exchange against a pre-configured assistant through the stateful
thread/run resources, polling the run until it reaches a terminal state.
"""

import asyncio
import httpx
import logging
import time
from typing import Optional, List, Dict, Any

from .base import LLMProvider, LLMMessage, LLMResponse
from ..core.errors import UpstreamError, UpstreamTimeoutError, UpstreamConfigurationError

logger = logging.getLogger(__name__)

# Run lifecycle: queued -> in_progress -> {completed | failed | cancelled | expired}
RUN_COMPLETED = "completed"
RUN_PENDING_STATES = {"queued", "in_progress", "cancelling"}
RUN_FAILED_STATES = {"failed", "cancelled", "expired", "incomplete", "requires_action"}


class AssistantProvider(LLMProvider):
    """
    Asynchronous run strategy.

    Per exchange: create a thread seeded with the prior turns, append the new
    user message, start a run, poll its status every ``poll_interval`` seconds
    for at most ``max_poll_attempts`` checks, then read the latest assistant
    message from the thread.
    """

    name = "assistant"

    def __init__(
        self,
        api_key: str,
        assistant_id: Optional[str] = None,
        model: str = "",
        base_url: str = "https://api.openai.com/v1",
        poll_interval: float = 1.0,
        max_poll_attempts: int = 60,
        timeout: float = 60.0,
        log_calls: bool = True,
    ):
        super().__init__(api_key, model, base_url, timeout=timeout, log_calls=log_calls)
        self.assistant_id = assistant_id
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts

    def _get_headers(self) -> Dict[str, str]:
        headers = super()._get_headers()
        headers["OpenAI-Beta"] = "assistants=v2"
        return headers

    async def generate_reply(self, messages: List[LLMMessage]) -> LLMResponse:
        if not self.assistant_id:
            raise UpstreamConfigurationError("OPENAI_ASSISTANT_ID is not configured")
        if not messages:
            raise UpstreamError("Cannot start a run without a user message")

        start_time = time.time()
        *history, latest = messages

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                thread = await self._request(client, "POST", "/threads", payload={
                    "messages": self._format_messages(history),
                })
                thread_id = self._require_id(thread, "thread")

                await self._request(
                    client, "POST", f"/threads/{thread_id}/messages",
                    payload={"role": latest.role, "content": latest.content},
                )

                run_payload: Dict[str, Any] = {"assistant_id": self.assistant_id}
                if self.model:
                    run_payload["model"] = self.model
                run = await self._request(
                    client, "POST", f"/threads/{thread_id}/runs", payload=run_payload
                )
                run_id = self._require_id(run, "run")

                run = await self._wait_for_run(client, thread_id, run_id, run)
                content = await self._latest_assistant_reply(client, thread_id, run_id)

            usage = run.get("usage") or {}
            duration_ms = (time.time() - start_time) * 1000
            if self.log_calls:
                logger.info(
                    "Upstream run completed",
                    extra={"extra_fields": {
                        "strategy": self.name,
                        "assistant_id": self.assistant_id,
                        "thread_id": thread_id,
                        "run_id": run_id,
                        "model": run.get("model", self.model),
                        "prompt_tokens": usage.get("prompt_tokens", 0),
                        "completion_tokens": usage.get("completion_tokens", 0),
                        "total_tokens": usage.get("total_tokens", 0),
                        "duration_ms": round(duration_ms, 2),
                    }}
                )

            return LLMResponse(
                content=content,
                model=run.get("model", self.model),
                usage=usage,
                raw=run,
            )
        except UpstreamError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Upstream run failed: {e}",
                extra={"extra_fields": {
                    "strategy": self.name,
                    "assistant_id": self.assistant_id,
                    "status_code": e.status_code,
                    "duration_ms": round(duration_ms, 2),
                    "error": str(e),
                }}
            )
            raise

    async def _wait_for_run(
        self,
        client: httpx.AsyncClient,
        thread_id: str,
        run_id: str,
        run: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Poll the run until it leaves the pending states or the attempt bound is hit."""
        status = run.get("status")
        attempts = 0
        while status in RUN_PENDING_STATES:
            if attempts >= self.max_poll_attempts:
                raise UpstreamTimeoutError(
                    f"Run {run_id} still {status} after {attempts} status checks"
                )
            await asyncio.sleep(self.poll_interval)
            run = await self._request(client, "GET", f"/threads/{thread_id}/runs/{run_id}")
            status = run.get("status")
            attempts += 1
            logger.debug(f"Run {run_id} status: {status} (check {attempts})")

        if status == RUN_COMPLETED:
            return run

        last_error = run.get("last_error")
        if isinstance(last_error, dict):
            reason = last_error.get("message") or last_error.get("code")
        else:
            reason = last_error
        if status in RUN_FAILED_STATES:
            message = f"Run {run_id} ended with status {status}"
        else:
            message = f"Run {run_id} returned unknown status {status!r}"
        if reason:
            message += f": {reason}"
        raise UpstreamError(message)

    async def _latest_assistant_reply(
        self,
        client: httpx.AsyncClient,
        thread_id: str,
        run_id: str,
    ) -> str:
        """Read the newest assistant message of the thread as plain text."""
        listing = await self._request(
            client, "GET", f"/threads/{thread_id}/messages",
            params={"order": "desc", "limit": 20, "run_id": run_id},
        )
        try:
            for message in listing.get("data") or []:
                if message.get("role") != "assistant":
                    continue
                parts = [
                    block["text"]["value"]
                    for block in message.get("content") or []
                    if block.get("type") == "text"
                ]
                return "".join(parts)
        except (AttributeError, KeyError, TypeError) as e:
            raise UpstreamError("Upstream returned a malformed message listing") from e
        return ""

    @staticmethod
    def _require_id(resource: Dict[str, Any], kind: str) -> str:
        resource_id = resource.get("id")
        if not resource_id:
            raise UpstreamError(f"Upstream did not return a {kind} id")
        return resource_id
