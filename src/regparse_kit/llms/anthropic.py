# src/regparse_kit/llms/anthropic.py

import logging
from collections.abc import AsyncIterator
from time import monotonic
from typing import Any

from anthropic import NOT_GIVEN, APIError, AsyncAnthropic
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from regparse_kit.observability import names
from regparse_kit.observability.base import MetricsHook, NoOpMetricsHook

from .base import LLMClient, Message, Role

logger = logging.getLogger(__name__)

# Anthropic requires max_tokens; structured documents need a large budget.
DEFAULT_MAX_TOKENS = 16384


class AnthropicLLMClient(LLMClient):
    """Anthropic streaming client.

    Stateless. Transport-only retries. No behavior.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-20250514",
        timeout: float = 120.0,
        max_retries: int = 3,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._client = AsyncAnthropic(api_key=api_key, timeout=timeout)
        self._model = model
        self._max_retries = max_retries
        self.metrics_hook = metrics_hook
        logger.info(
            "Initialized AnthropicLLMClient with model=%s, timeout=%s",
            model,
            timeout,
        )

    async def stream(
        self,
        *,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        start = monotonic()
        labels = {"provider": "anthropic", "model": self._model}

        # Extract system message (Anthropic handles it separately)
        system_content, non_system_messages = self._extract_system(messages)

        logger.debug(
            "Opening Anthropic stream: model=%s, messages=%d",
            self._model,
            len(messages),
        )

        try:
            raw_stream = await self._open_stream(
                system=system_content,
                messages=self._convert_messages(non_system_messages),
                temperature=temperature,
                max_tokens=max_tokens or DEFAULT_MAX_TOKENS,
            )
        except APIError:
            self.metrics_hook.increment(names.LLM_ERRORS_TOTAL, labels=labels)
            raise
        self.metrics_hook.increment(names.LLM_REQUESTS_TOTAL, labels=labels)

        fragments = 0
        async for event in raw_stream:
            text = self._extract_text(event)
            if text:
                fragments += 1
                yield text

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.LLM_STREAM_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.LLM_FRAGMENTS_TOTAL, fragments)
        logger.info(
            "Anthropic stream finished: fragments=%d, latency=%.0fms",
            fragments,
            elapsed_ms,
        )

    async def _open_stream(
        self,
        *,
        system: str | None,
        messages: list[dict[str, Any]],
        temperature: float,
        max_tokens: int,
    ) -> Any:
        """Open the Anthropic stream with transport-only retries."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=10),
            retry=retry_if_exception_type(APIError),  # Transport only
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                return await self._client.messages.create(
                    model=self._model,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=temperature,
                    max_tokens=max_tokens,
                    system=system if system else NOT_GIVEN,
                    stream=True,
                )

    def _extract_system(
        self, messages: list[Message]
    ) -> tuple[str | None, list[Message]]:
        """Extract system message from message list.

        Anthropic requires system message as a separate parameter.
        """
        system_content = None
        non_system = []

        for m in messages:
            if m.role == Role.SYSTEM:
                system_content = m.content
            else:
                non_system.append(m)

        return system_content, non_system

    def _convert_messages(self, messages: list[Message]) -> list[dict]:
        """Convert Message objects to Anthropic format.

        Internal only. Provider format never leaks outside.
        """
        return [{"role": m.role.value, "content": m.content} for m in messages]

    def _extract_text(self, event: Any) -> str | None:
        """Pull the text out of a ``content_block_delta`` event.

        This is the boundary. Raw provider objects stop here.
        """
        if event.type != "content_block_delta":
            return None
        if event.delta.type != "text_delta":
            return None
        return event.delta.text
