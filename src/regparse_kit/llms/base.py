# src/regparse_kit/llms/base.py

from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from regparse_kit.observability.base import MetricsHook


class Role(str, Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single message in the conversation.

    Immutable. Stateless. Provider-agnostic.
    """

    role: Role
    content: str


class LLMClient(Protocol):
    """Protocol for streaming LLM clients.

    Design principles:
    - Stateless: Every call receives full message list
    - Transport only: Retries only on network/rate-limit errors while
      opening the stream
    - No behavior: No loops, no prompt fixing, no "smart" retries
    - No leakage: Provider objects never escape the adapter
    """

    metrics_hook: MetricsHook

    def stream(
        self,
        *,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Stream a completion as text fragments.

        Args:
            messages: Complete conversation history. No internal state.
            temperature: Sampling temperature (0.0 = deterministic).
            max_tokens: Maximum tokens in response.

        Yields:
            Text fragments in arrival order. Their concatenation is the
            model's answer; fragments are never revised.

        Raises:
            Provider-specific errors after retry exhaustion, or any error
            raised while the stream is being consumed.

        Note:
            Never retries on "bad" model output - that's the caller's problem.
        """
        ...
