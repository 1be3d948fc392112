# src/regparse_kit/streaming/events.py

from dataclasses import dataclass
from enum import Enum
from typing import Any


class EventType(str, Enum):
    METADATA = "metadata"
    NODE = "node"
    COMPLETE = "complete"
    ERROR = "error"
    CHUNK_COMPLETE = "chunk_complete"


@dataclass(frozen=True)
class ParseEvent:
    """Output of one extraction step.

    ``data`` is a DocumentMetadata, HierarchyNode, ParsedDocument or
    ExtractionError depending on ``type``.
    """

    type: EventType
    data: Any


@dataclass(frozen=True)
class StreamEvent:
    """Content event delivered to the consumer.

    Exactly one event per document has ``terminal=True``: the final
    ``complete``, or a fatal ``error``.
    """

    type: EventType
    data: Any
    chunk_index: int | None = None
    total_chunks: int | None = None
    terminal: bool = False


@dataclass(frozen=True)
class ProgressEvent:
    percent: float
    message: str
