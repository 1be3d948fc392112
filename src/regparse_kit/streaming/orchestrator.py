# src/regparse_kit/streaming/orchestrator.py

import logging
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass, field
from time import monotonic

from regparse_kit.chunking import DocumentChunk, DocumentChunker
from regparse_kit.chunking.chunking import DEFAULT_MAX_TOKENS
from regparse_kit.errors import ChunkingError, ModelStreamError
from regparse_kit.llms.base import LLMClient, Message
from regparse_kit.observability import names
from regparse_kit.observability.base import MetricsHook, NoOpMetricsHook
from regparse_kit.prompts import (
    Prompt,
    build_chunk_messages,
    build_document_messages,
    default_structure_prompt,
)

from .events import EventType, ParseEvent, ProgressEvent, StreamEvent
from .extractor import StreamingParseState, process_chunk
from .merge import merge_children
from .recovery import RecoveryParser
from .schema import (
    DocumentMetadata,
    HierarchyNode,
    ParsedDocument,
    placeholder_metadata,
)

logger = logging.getLogger(__name__)

OrchestratorEvent = ProgressEvent | StreamEvent


@dataclass(frozen=True)
class StreamingConfig:
    """Configuration for document stream processing.

    Immutable. Progress values are percentages.
    """

    # Estimated tokens above which the document is chunked.
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = 0.1
    max_output_tokens: int | None = None
    progress_floor: float = 15.0
    progress_ceiling: float = 90.0
    # Single-document mode: progress gained per received fragment.
    progress_step: float = 2.0
    # Chunked mode: expected answer length relative to the chunk length.
    expected_output_ratio: float = 1.5


@dataclass
class _DocumentRun:
    """Merged state of one process_document invocation."""

    metadata: DocumentMetadata | None = None
    hierarchy: list[HierarchyNode] = field(default_factory=list)
    forwarded_ids: set[str] = field(default_factory=set)
    progress: float = 0.0

    def advance(self, percent: float) -> float:
        self.progress = max(self.progress, round(percent, 1))
        return self.progress


class StreamOrchestrator:
    """Drives model streams for a document and merges what they yield.

    Small documents go through one stream. Documents over the token limit
    are split and their chunks streamed strictly one after another, each
    with a fresh extractor state.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        *,
        prompt: Prompt | None = None,
        config: StreamingConfig = StreamingConfig(),
        chunker: DocumentChunker | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self._llm = llm_client
        self._prompt = prompt or default_structure_prompt()
        self._config = config
        self._chunker = chunker or DocumentChunker(metrics_hook=metrics_hook)
        self._recovery = RecoveryParser(metrics_hook=metrics_hook)
        self.metrics_hook = metrics_hook

    async def process_document(
        self, document_text: str
    ) -> AsyncIterator[OrchestratorEvent]:
        """Stream progress and content events for one document.

        The sequence always ends with exactly one terminal event: a
        ``complete`` carrying the merged ParsedDocument, or an ``error``
        carrying a ChunkingError or ModelStreamError. On error, merged state
        is discarded; only node events already delivered survive.
        """
        start = monotonic()
        run = _DocumentRun()
        yield self._progress(run, 5, "Analyzing document size...")

        try:
            if self._chunker.exceeds_limit(document_text, self._config.max_tokens):
                async for event in self._process_chunked(document_text, run):
                    yield event
            else:
                async for event in self._process_single(document_text, run):
                    yield event
        except (ChunkingError, ModelStreamError) as exc:
            logger.error("Document processing failed: %s", exc)
            self.metrics_hook.increment(
                names.STREAM_ERRORS_TOTAL, labels={"error": type(exc).__name__}
            )
            self._record_duration(start)
            yield StreamEvent(type=EventType.ERROR, data=exc, terminal=True)
            return

        yield self._progress(run, 95, "Finalizing document structure...")
        document = ParsedDocument(
            metadata=run.metadata or placeholder_metadata(),
            hierarchy=run.hierarchy,
        )
        self.metrics_hook.record_gauge(names.STREAM_MERGED_NODES, len(run.hierarchy))
        self._record_duration(start)
        logger.info(
            "Document processed: title=%s, top-level nodes=%d",
            document.metadata.title,
            len(document.hierarchy),
        )
        yield self._progress(run, 100, "Analysis complete!")
        yield StreamEvent(type=EventType.COMPLETE, data=document, terminal=True)

    async def _process_single(
        self, document_text: str, run: _DocumentRun
    ) -> AsyncIterator[OrchestratorEvent]:
        yield self._progress(run, 10, "Starting AI analysis...")
        messages = build_document_messages(self._prompt, document_text)
        yield self._progress(run, 15, "Connecting to AI model...")

        state = StreamingParseState()
        fragments = 0
        async for fragment in self._stream(messages):
            fragments += 1
            state, parsed = process_chunk(state, fragment)
            for event in parsed:
                for out in self._accept(event, run, chunk=None):
                    yield out

            percent = min(
                self._config.progress_ceiling,
                self._config.progress_floor + fragments * self._config.progress_step,
            )
            yield self._progress(
                run, percent, f"Processing... ({fragments} chunks received)"
            )

        logger.debug("Single stream ended after %d fragments", fragments)
        for event in self._recover(state, run, chunk=None):
            yield event

    async def _process_chunked(
        self, document_text: str, run: _DocumentRun
    ) -> AsyncIterator[OrchestratorEvent]:
        yield self._progress(run, 10, "Splitting large document into chunks...")
        chunks = self._chunker.split(document_text)
        total = len(chunks)
        yield self._progress(run, 15, f"Processing {total} chunks...")

        floor = self._config.progress_floor
        share = (self._config.progress_ceiling - floor) / total
        for chunk in chunks:
            label = f"Processing chunk {chunk.index + 1} of {total}..."
            base = floor + chunk.index * share
            yield self._progress(run, base, label)
            logger.info("Starting chunk %d of %d", chunk.index + 1, total)

            expected = max(1.0, len(chunk.content) * self._config.expected_output_ratio)
            state = StreamingParseState()
            async for fragment in self._stream(build_chunk_messages(self._prompt, chunk)):
                state, parsed = process_chunk(state, fragment)
                for event in parsed:
                    for out in self._accept(event, run, chunk=chunk):
                        yield out
                fraction = min(0.95, len(state.accumulated_text) / expected)
                yield self._progress(run, base + fraction * share, label)

            for event in self._recover(state, run, chunk=chunk):
                yield event

            self.metrics_hook.increment(names.STREAM_CHUNKS_PROCESSED_TOTAL)
            logger.info(
                "Completed chunk %d of %d, merged top-level nodes=%d",
                chunk.index + 1,
                total,
                len(run.hierarchy),
            )
            yield StreamEvent(
                type=EventType.CHUNK_COMPLETE,
                data={"chunk_index": chunk.index, "total_chunks": total},
                chunk_index=chunk.index,
                total_chunks=total,
            )

    async def _stream(self, messages: list[Message]) -> AsyncIterator[str]:
        try:
            async for fragment in self._llm.stream(
                messages=messages,
                temperature=self._config.temperature,
                max_tokens=self._config.max_output_tokens,
            ):
                self.metrics_hook.increment(names.STREAM_FRAGMENTS_TOTAL)
                yield fragment
        except Exception as exc:
            raise ModelStreamError(f"Model stream failed: {exc}") from exc

    def _accept(
        self, event: ParseEvent, run: _DocumentRun, *, chunk: DocumentChunk | None
    ) -> Iterator[StreamEvent]:
        """Fold one extractor event into the run and yield what to forward."""
        chunk_index = chunk.index if chunk else None
        total_chunks = chunk.total_chunks if chunk else None

        if event.type is EventType.METADATA:
            if run.metadata is not None:
                logger.debug("Discarding later metadata proposal: %s", event.data.title)
                return
            run.metadata = event.data
        elif event.type is EventType.NODE:
            node = event.data
            if chunk is None:
                if node.id in run.forwarded_ids:
                    return
                run.hierarchy.append(node)
            else:
                run.hierarchy = merge_children(run.hierarchy, [node])
            run.forwarded_ids.add(node.id)
            self.metrics_hook.increment(names.STREAM_NODES_EMITTED_TOTAL)
        elif event.type is EventType.ERROR:
            self.metrics_hook.increment(names.STREAM_EXTRACTION_ERRORS_TOTAL)
        else:
            # Per-stream completion; the document completes once, at the end.
            return

        yield StreamEvent(
            type=event.type,
            data=event.data,
            chunk_index=chunk_index,
            total_chunks=total_chunks,
        )

    def _recover(
        self,
        state: StreamingParseState,
        run: _DocumentRun,
        *,
        chunk: DocumentChunk | None,
    ) -> Iterator[StreamEvent]:
        """Fold in what recovery finds in a stream that never completed."""
        if state.is_complete:
            return
        if not state.accumulated_text.strip():
            logger.warning("Stream ended without any text, nothing to recover")
            return

        logger.warning(
            "Stream ended without complete JSON (%d chars), attempting recovery",
            len(state.accumulated_text),
        )
        result = self._recovery.recover(state.accumulated_text)
        if result.is_failure:
            return

        if state.parsed_metadata is None and result.metadata_found:
            yield from self._accept(
                ParseEvent(type=EventType.METADATA, data=result.document.metadata),
                run,
                chunk=chunk,
            )

        emitted = state.emitted_ids
        for node in result.document.hierarchy:
            if node.id in emitted:
                continue
            emitted.add(node.id)
            yield from self._accept(
                ParseEvent(type=EventType.NODE, data=node), run, chunk=chunk
            )

    def _progress(self, run: _DocumentRun, percent: float, message: str) -> ProgressEvent:
        return ProgressEvent(percent=run.advance(percent), message=message)

    def _record_duration(self, start: float) -> None:
        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.STREAM_DOCUMENT_DURATION, elapsed_ms)
