from collections.abc import AsyncIterator

import pytest

from regparse_kit.llms.base import Message
from regparse_kit.observability.base import NoOpMetricsHook


class FakeLLMClient:
    """Replays scripted fragment lists, one per ``stream`` call.

    An exception instance inside a script is raised at that point of the
    stream.
    """

    def __init__(self, scripts: list[list[str | Exception]]) -> None:
        self.scripts = list(scripts)
        self.calls: list[dict] = []
        self.metrics_hook = NoOpMetricsHook()

    async def stream(
        self,
        *,
        messages: list[Message],
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        self.calls.append(
            {"messages": messages, "temperature": temperature, "max_tokens": max_tokens}
        )
        script = self.scripts.pop(0)
        for item in script:
            if isinstance(item, Exception):
                raise item
            yield item


@pytest.fixture
def fake_llm() -> type[FakeLLMClient]:
    return FakeLLMClient


@pytest.fixture
def full_document() -> str:
    return (
        '{"metadata":{"title":"T","jurisdiction":"J","document_type":"D","source":"S"},'
        '"hierarchy":[{"id":"p1","type":"part","number":"I","title":"","text":"",'
        '"level":1,"references":[],"children":[]}]}'
    )
