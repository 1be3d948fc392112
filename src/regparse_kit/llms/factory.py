# src/regparse_kit/llms/factory.py

from regparse_kit.observability.base import MetricsHook, NoOpMetricsHook

from .base import LLMClient
from .config import LLMConfig


def create_llm_client(
    config: LLMConfig,
    metrics_hook: MetricsHook = NoOpMetricsHook(),
) -> LLMClient:
    """Build the streaming client a ``StreamOrchestrator`` reads from.

    Provider SDKs are imported lazily, so only the selected one must be
    installed and importable.

    Raises:
        ValueError: If provider is unknown.

    Example:
        >>> client = create_llm_client(LLMConfig(provider="anthropic", model="claude-sonnet-4-20250514"))
        >>> messages = build_document_messages(default_structure_prompt(), text)
        >>> async for fragment in client.stream(messages=messages, temperature=0.1):
        ...     state, events = process_chunk(state, fragment)
    """
    if config.provider == "openai":
        from .openai import OpenAILLMClient as client_class
    elif config.provider == "anthropic":
        from .anthropic import AnthropicLLMClient as client_class
    else:
        raise ValueError(f"Unknown LLM provider: {config.provider}")

    return client_class(
        api_key=config.api_key,
        model=config.model,
        timeout=config.timeout,
        max_retries=config.max_retries,
        metrics_hook=metrics_hook,
    )
