from .messages import build_chunk_messages, build_document_messages
from .prompt import Prompt
from .prompts_library import PromptsLibrary, default_structure_prompt

__all__ = [
    "Prompt",
    "PromptsLibrary",
    "build_chunk_messages",
    "build_document_messages",
    "default_structure_prompt",
]
