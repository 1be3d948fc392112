# src/regparse_kit/streaming/extractor.py

"""Incremental extraction of metadata and nodes from a growing model buffer.

The buffer is never required to be valid JSON. Each step re-scans the whole
buffer and slices off what was already emitted, so extraction is idempotent
for a given buffer.

Extraction state is an immutable value passed into and returned from
``process_chunk``; nothing is shared between streams.
"""

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum

from regparse_kit.errors import ExtractionError

from .events import EventType, ParseEvent
from .scanner import find_root_key_value, first_object_span, iter_object_spans
from .schema import (
    DocumentMetadata,
    HierarchyNode,
    ParsedDocument,
    placeholder_metadata,
    validate_metadata,
    validate_node,
)

logger = logging.getLogger(__name__)


class ParsePhase(str, Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    COMPLETE = "complete"


class CandidateStatus(str, Enum):
    COMPLETE = "complete"  # closed, parses, valid node shape
    INCOMPLETE = "incomplete"  # still open at the end of the buffer
    INVALID = "invalid"  # closed but will never become a node


@dataclass(frozen=True)
class Candidate:
    status: CandidateStatus
    text: str
    node: HierarchyNode | None = None
    reason: str | None = None


@dataclass(frozen=True)
class StreamingParseState:
    accumulated_text: str = ""
    parsed_metadata: DocumentMetadata | None = None
    parsed_nodes: tuple[HierarchyNode, ...] = ()
    # Complete candidates consumed so far, duplicates included.
    scanned_nodes: int = 0
    is_complete: bool = False

    @property
    def phase(self) -> ParsePhase:
        if self.is_complete:
            return ParsePhase.COMPLETE
        if self.accumulated_text:
            return ParsePhase.ACCUMULATING
        return ParsePhase.EMPTY

    @property
    def emitted_ids(self) -> set[str]:
        return {node.id for node in self.parsed_nodes}


def classify_candidate(text: str, closed: bool) -> Candidate:
    if not closed:
        return Candidate(status=CandidateStatus.INCOMPLETE, text=text)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        return Candidate(status=CandidateStatus.INVALID, text=text, reason=str(exc))

    validation = validate_node(data)
    if not validation.is_valid:
        return Candidate(
            status=CandidateStatus.INVALID, text=text, reason=validation.error
        )
    return Candidate(status=CandidateStatus.COMPLETE, text=text, node=validation.node)


def scan_candidates(buffer: str) -> list[Candidate]:
    """Classify every top-level object of the ``hierarchy`` array."""
    start = find_root_key_value(buffer, "hierarchy")
    if start is None or buffer[start] != "[":
        return []
    return [
        classify_candidate(span.slice(buffer), span.closed)
        for span in iter_object_spans(buffer, start + 1)
    ]


def extract_nodes(buffer: str) -> list[HierarchyNode]:
    return [
        candidate.node
        for candidate in scan_candidates(buffer)
        if candidate.node is not None
    ]


def extract_metadata(buffer: str) -> DocumentMetadata | None:
    """Return the root-level ``metadata`` object once its braces balance."""
    start = find_root_key_value(buffer, "metadata")
    if start is None or buffer[start] != "{":
        return None
    span = first_object_span(buffer, start)
    if span is None or not span.closed:
        return None
    try:
        data = json.loads(span.slice(buffer))
    except json.JSONDecodeError:
        return None
    return validate_metadata(data)


def is_parse_complete(buffer: str) -> bool:
    trimmed = buffer.strip()
    if not (trimmed.startswith("{") and trimmed.endswith("}")):
        return False
    try:
        json.loads(trimmed)
    except json.JSONDecodeError:
        return False
    return True


def process_chunk(
    state: StreamingParseState, text: str
) -> tuple[StreamingParseState, list[ParseEvent]]:
    """Append ``text`` and return the new state plus the events it unlocked.

    Events come in a fixed order: metadata (at most once per state
    lineage), newly closed nodes in buffer order, then completion. A failure
    during extraction yields one ``error`` event; the appended text and any
    events already produced in this call are kept.
    """
    state = replace(state, accumulated_text=state.accumulated_text + text)
    events: list[ParseEvent] = []

    try:
        if state.parsed_metadata is None:
            metadata = extract_metadata(state.accumulated_text)
            if metadata is not None:
                state = replace(state, parsed_metadata=metadata)
                events.append(ParseEvent(type=EventType.METADATA, data=metadata))

        nodes = extract_nodes(state.accumulated_text)
        if len(nodes) > state.scanned_nodes:
            seen = state.emitted_ids
            fresh: list[HierarchyNode] = []
            for node in nodes[state.scanned_nodes :]:
                if node.id in seen:
                    logger.debug("Skipping repeated node id: %s", node.id)
                    continue
                seen.add(node.id)
                fresh.append(node)
            state = replace(
                state,
                parsed_nodes=state.parsed_nodes + tuple(fresh),
                scanned_nodes=len(nodes),
            )
            events.extend(ParseEvent(type=EventType.NODE, data=n) for n in fresh)

        if not state.is_complete and is_parse_complete(state.accumulated_text):
            state = replace(state, is_complete=True)
            events.append(
                ParseEvent(
                    type=EventType.COMPLETE,
                    data=ParsedDocument(
                        metadata=state.parsed_metadata or placeholder_metadata(),
                        hierarchy=list(state.parsed_nodes),
                    ),
                )
            )
    except Exception as exc:
        logger.warning("Streaming extraction failed: %s", exc)
        error = ExtractionError(f"Extraction failed: {exc}")
        error.__cause__ = exc
        events.append(ParseEvent(type=EventType.ERROR, data=error))

    return state, events


class StreamingExtractor:
    """Holds one ``StreamingParseState`` for callers that prefer an object."""

    def __init__(self) -> None:
        self.state = StreamingParseState()

    @property
    def phase(self) -> ParsePhase:
        return self.state.phase

    def process_chunk(self, text: str) -> list[ParseEvent]:
        self.state, events = process_chunk(self.state, text)
        return events

    def reset(self) -> None:
        self.state = StreamingParseState()
