# tests/unit/llms/test_anthropic.py

from collections.abc import AsyncIterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from regparse_kit.llms.anthropic import DEFAULT_MAX_TOKENS, AnthropicLLMClient
from regparse_kit.llms.base import Message, Role


def _event(event_type: str, delta_type: str = "", text: str = "") -> MagicMock:
    event = MagicMock()
    event.type = event_type
    event.delta.type = delta_type
    event.delta.text = text
    return event


async def _events(*events: MagicMock) -> AsyncIterator[MagicMock]:
    for event in events:
        yield event


async def _collect(stream: AsyncIterator[str]) -> list[str]:
    return [fragment async for fragment in stream]


@pytest.fixture
def mock_anthropic_stream() -> AsyncIterator[MagicMock]:
    """Create a mock Anthropic event stream."""
    return _events(
        _event("message_start"),
        _event("content_block_start"),
        _event("content_block_delta", "text_delta", '{"metadata"'),
        _event("content_block_delta", "input_json_delta"),
        _event("content_block_delta", "text_delta", ": {}}"),
        _event("content_block_stop"),
        _event("message_stop"),
    )


class TestAnthropicLLMClient:
    @pytest.mark.asyncio
    async def test_stream_yields_text_deltas(
        self, mock_anthropic_stream: AsyncIterator[MagicMock]
    ) -> None:
        """Only text deltas reach the caller."""
        with patch("regparse_kit.llms.anthropic.AsyncAnthropic") as mock_anthropic:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=mock_anthropic_stream)
            mock_anthropic.return_value = mock_client

            client = AnthropicLLMClient(api_key="test-key")
            fragments = await _collect(
                client.stream(messages=[Message(role=Role.USER, content="Hello!")])
            )

            assert fragments == ['{"metadata"', ": {}}"]

    @pytest.mark.asyncio
    async def test_system_message_is_sent_separately(self) -> None:
        with patch("regparse_kit.llms.anthropic.AsyncAnthropic") as mock_anthropic:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=_events())
            mock_anthropic.return_value = mock_client

            client = AnthropicLLMClient(api_key="test-key")
            await _collect(
                client.stream(
                    messages=[
                        Message(role=Role.SYSTEM, content="Parse the document."),
                        Message(role=Role.USER, content="Document to parse:"),
                    ],
                    temperature=0.1,
                )
            )

            kwargs = mock_client.messages.create.call_args.kwargs
            assert kwargs["system"] == "Parse the document."
            assert kwargs["messages"] == [
                {"role": "user", "content": "Document to parse:"}
            ]
            assert kwargs["stream"] is True
            assert kwargs["temperature"] == 0.1
            assert kwargs["max_tokens"] == DEFAULT_MAX_TOKENS

    def test_extract_system(self) -> None:
        with patch("regparse_kit.llms.anthropic.AsyncAnthropic"):
            client = AnthropicLLMClient(api_key="test-key")

            system, rest = client._extract_system(
                [
                    Message(role=Role.SYSTEM, content="You are helpful."),
                    Message(role=Role.USER, content="Hello"),
                    Message(role=Role.ASSISTANT, content="Hi there!"),
                ]
            )

            assert system == "You are helpful."
            assert [m.role for m in rest] == [Role.USER, Role.ASSISTANT]

    @pytest.mark.asyncio
    async def test_metrics_hook_called(
        self, mock_anthropic_stream: AsyncIterator[MagicMock]
    ) -> None:
        """Test that metrics hook is called."""
        with patch("regparse_kit.llms.anthropic.AsyncAnthropic") as mock_anthropic:
            mock_client = MagicMock()
            mock_client.messages.create = AsyncMock(return_value=mock_anthropic_stream)
            mock_anthropic.return_value = mock_client

            metrics_hook = MagicMock()
            client = AnthropicLLMClient(api_key="test-key", metrics_hook=metrics_hook)

            await _collect(client.stream(messages=[Message(role=Role.USER, content="Hi")]))

            metrics_hook.record_latency.assert_called_once()
            call_args = metrics_hook.record_latency.call_args
            assert call_args[0][0] == "llm_stream_duration"
            metrics_hook.increment.assert_any_call(
                "llm_requests_total",
                labels={"provider": "anthropic", "model": "claude-sonnet-4-20250514"},
            )
