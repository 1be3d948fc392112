from regparse_kit.chunking import DocumentChunk
from regparse_kit.llms.base import Message, Role

from .prompt import Prompt

CHUNK_NOTICE = (
    "**IMPORTANT**: This is chunk {position} of {total} from a larger document. "
    "Parse only this chunk following the same JSON structure, but note this is "
    "a partial document."
)


def build_document_messages(prompt: Prompt, document_text: str) -> list[Message]:
    return [
        Message(role=Role.SYSTEM, content=prompt.system),
        Message(role=Role.USER, content=prompt.render(document_text=document_text)),
    ]


def build_chunk_messages(prompt: Prompt, chunk: DocumentChunk) -> list[Message]:
    """Messages for one chunk of a document that was too large for one call."""
    notice = CHUNK_NOTICE.format(position=chunk.index + 1, total=chunk.total_chunks)
    return [
        Message(role=Role.SYSTEM, content=f"{prompt.system}\n\n{notice}"),
        Message(role=Role.USER, content=prompt.render(document_text=chunk.content)),
    ]
