from regparse_kit.chunking import DocumentChunk
from regparse_kit.llms.base import Role
from regparse_kit.prompts import (
    Prompt,
    build_chunk_messages,
    build_document_messages,
)


def _prompt() -> Prompt:
    return Prompt(
        name="p",
        version="1",
        description="d",
        inputs={"document_text": "t"},
        system="Return JSON.",
        template="Document to parse:\n{{ document_text }}",
    )


class TestBuildMessages:
    def test_document_messages(self) -> None:
        system, user = build_document_messages(_prompt(), "Section 1.")

        assert system.role is Role.SYSTEM
        assert system.content == "Return JSON."
        assert user.role is Role.USER
        assert user.content == "Document to parse:\nSection 1."

    def test_chunk_messages_carry_position_notice(self) -> None:
        chunk = DocumentChunk(
            content="Section 9.", index=2, start_char=0, end_char=10, total_chunks=4
        )

        system, user = build_chunk_messages(_prompt(), chunk)

        assert system.content.startswith("Return JSON.\n\n")
        assert "chunk 3 of 4" in system.content
        assert "partial document" in system.content
        assert user.content == "Document to parse:\nSection 9."
