# src/regparse_kit/pipeline.py

import logging
from collections.abc import AsyncIterator, Sequence
from pathlib import Path

from regparse_kit.errors import DocumentReadError
from regparse_kit.parsers import (
    DocumentReader,
    PdfReader,
    TextReader,
    clean_document_text,
)
from regparse_kit.streaming import (
    EventType,
    ParsedDocument,
    ProgressEvent,
    StreamEvent,
    StreamOrchestrator,
)

logger = logging.getLogger(__name__)

# Orchestrator progress p is reported as ANALYSIS_OFFSET + ANALYSIS_SCALE * p.
ANALYSIS_OFFSET = 30.0
ANALYSIS_SCALE = 0.6
ANALYSIS_CEILING = 90.0


class DocumentAnalyzer:
    """Reads a file, cleans its text and streams it through the orchestrator."""

    def __init__(
        self,
        orchestrator: StreamOrchestrator,
        readers: Sequence[DocumentReader] | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._readers = list(readers) if readers is not None else [PdfReader(), TextReader()]

    async def analyze(self, path: str | Path) -> AsyncIterator[ProgressEvent | StreamEvent]:
        """Stream events for one file, ending in one terminal event.

        A file no reader accepts, or one that cannot be read, ends the
        sequence with a terminal ``error`` event carrying DocumentReadError.
        """
        path = Path(path)
        yield ProgressEvent(percent=10, message="Reading document content...")
        try:
            document = self._reader_for(path).read(path)
        except DocumentReadError as exc:
            logger.error("Could not read %s: %s", path, exc)
            yield StreamEvent(type=EventType.ERROR, data=exc, terminal=True)
            return

        yield ProgressEvent(percent=20, message="Cleaning and preprocessing text...")
        text = clean_document_text(document.text)
        logger.info(
            "Cleaned %s: %d chars (raw %d)", document.name, len(text), len(document.text)
        )
        yield ProgressEvent(
            percent=ANALYSIS_OFFSET, message="Starting AI analysis with streaming..."
        )

        async for event in self._orchestrator.process_document(text):
            if isinstance(event, ProgressEvent):
                # The file-level completion is reported with the document below.
                if event.percent >= 100:
                    continue
                yield ProgressEvent(
                    percent=min(
                        ANALYSIS_CEILING, ANALYSIS_OFFSET + event.percent * ANALYSIS_SCALE
                    ),
                    message=event.message,
                )
            elif event.type is EventType.COMPLETE:
                yield ProgressEvent(percent=100, message="Analysis complete!")
                yield StreamEvent(
                    type=EventType.COMPLETE,
                    data=attach_source(event.data, document.name),
                    terminal=True,
                )
            else:
                yield event

    def _reader_for(self, path: Path) -> DocumentReader:
        for reader in self._readers:
            if reader.accepts(path):
                return reader
        raise DocumentReadError(f"No reader accepts {path.name}")


def attach_source(document: ParsedDocument, name: str) -> ParsedDocument:
    """Stamp the file name into the metadata, filling in an empty title."""
    metadata = document.metadata.model_copy(
        update={
            "title": document.metadata.title or name,
            "jurisdiction": document.metadata.jurisdiction or "Unknown",
            "document_type": document.metadata.document_type or "Document",
            "source": name,
        }
    )
    return document.model_copy(update={"metadata": metadata})
