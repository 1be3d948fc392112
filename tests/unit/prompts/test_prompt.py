import pytest

from regparse_kit.prompts.prompt import Prompt


@pytest.fixture
def prompt() -> Prompt:
    return Prompt(
        name="statute",
        version="1.0",
        description="Parse a statute",
        inputs={"document_text": "Text", "jurisdiction": "Where"},
        template="{{jurisdiction}}: {{ document_text }} ({{ jurisdiction }})",
    )


class TestRender:
    def test_fills_every_placeholder(self, prompt: Prompt) -> None:
        rendered = prompt.render(document_text="Art. 1", jurisdiction="BR")

        assert rendered == "BR: Art. 1 (BR)"

    def test_missing_value_raises(self, prompt: Prompt) -> None:
        with pytest.raises(KeyError, match="jurisdiction"):
            prompt.render(document_text="Art. 1")

    def test_values_are_not_reinterpreted(self, prompt: Prompt) -> None:
        rendered = prompt.render(
            document_text='{"a": "{{ jurisdiction }}"}', jurisdiction="EU"
        )

        assert rendered == 'EU: {"a": "{{ jurisdiction }}"} (EU)'

    def test_extra_values_are_ignored(self, prompt: Prompt) -> None:
        rendered = prompt.render(document_text="x", jurisdiction="y", unused="z")

        assert rendered == "y: x (y)"
