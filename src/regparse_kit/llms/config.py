# src/regparse_kit/llms/config.py

from dataclasses import dataclass
from typing import Literal

Provider = Literal["openai", "anthropic"]


@dataclass(frozen=True)
class LLMConfig:
    """Configuration for streaming LLM clients.

    Immutable. Explicit. No magic defaults from environment.
    """

    provider: Provider
    model: str
    api_key: str | None = None  # Falls back to provider's env var
    # Whole-document answers stream for minutes; this bounds each read.
    timeout: float = 120.0
    # Attempts to open a stream, first one included.
    max_retries: int = 3

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
