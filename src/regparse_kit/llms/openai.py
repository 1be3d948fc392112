# src/regparse_kit/llms/openai.py

import logging
from collections.abc import AsyncIterator
from time import monotonic
from typing import Any

from openai import NOT_GIVEN, AsyncOpenAI, OpenAIError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from regparse_kit.observability import names
from regparse_kit.observability.base import MetricsHook, NoOpMetricsHook

from .base import LLMClient, Message

logger = logging.getLogger(__name__)


class OpenAILLMClient(LLMClient):
    """OpenAI streaming client.

    Stateless. Transport-only retries. No behavior.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o",
        timeout: float = 120.0,
        max_retries: int = 3,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ):
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout)
        self._model = model
        self._max_retries = max_retries
        self.metrics_hook = metrics_hook
        logger.info(
            "Initialized OpenAILLMClient with model=%s, timeout=%s",
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
        labels = {"provider": "openai", "model": self._model}

        # Convert to provider format (internal only - never leaks)
        openai_messages = self._convert_messages(messages)

        logger.debug(
            "Opening OpenAI stream: model=%s, messages=%d",
            self._model,
            len(messages),
        )

        try:
            raw_stream = await self._open_stream(
                messages=openai_messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except OpenAIError:
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
            "OpenAI stream finished: fragments=%d, latency=%.0fms",
            fragments,
            elapsed_ms,
        )

    async def _open_stream(
        self,
        *,
        messages: list[dict[str, Any]],
        temperature: float,
        max_tokens: int | None,
    ) -> Any:
        """Open the OpenAI stream with transport-only retries."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=10),
            retry=retry_if_exception_type(OpenAIError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                return await self._client.chat.completions.create(
                    model=self._model,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=temperature,
                    max_tokens=max_tokens if max_tokens else NOT_GIVEN,  # type: ignore[arg-type]
                    stream=True,
                )

    def _convert_messages(self, messages: list[Message]) -> list[dict]:
        """Convert Message objects to OpenAI format.

        Internal only. Provider format never leaks outside.
        """
        return [{"role": m.role.value, "content": m.content} for m in messages]

    def _extract_text(self, event: Any) -> str | None:
        """Pull the text delta out of one stream chunk.

        This is the boundary. Raw provider objects stop here.
        """
        if not event.choices:
            return None
        return event.choices[0].delta.content
