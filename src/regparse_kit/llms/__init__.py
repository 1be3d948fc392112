# src/regparse_kit/llms/__init__.py

"""Streaming LLM client layer for regparse-kit.

Provides a thin, stateless abstraction over LLM providers that yields the
model's answer as text fragments.

Design principles:
- Stateless: Every call receives full message list
- Transport only: Retries only on network/rate-limit errors
- No behavior: No loops, no prompt fixing, no "smart" retries
- No leakage: Provider objects never escape the adapter

Example:
    >>> from regparse_kit.llms import create_llm_client, LLMConfig, Message, Role
    >>>
    >>> config = LLMConfig(provider="openai", model="gpt-4o")
    >>> client = create_llm_client(config)
    >>>
    >>> async for fragment in client.stream(
    ...     messages=[Message(role=Role.USER, content="Hello!")]
    ... ):
    ...     print(fragment, end="")
"""

from .base import LLMClient, Message, Role
from .config import LLMConfig
from .factory import create_llm_client

__all__ = [
    # Factory
    "create_llm_client",
    # Protocol
    "LLMClient",
    # Config
    "LLMConfig",
    # Types
    "Message",
    "Role",
]
