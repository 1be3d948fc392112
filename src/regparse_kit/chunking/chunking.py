import logging
import math
from dataclasses import dataclass
from time import monotonic

from langchain_text_splitters import RecursiveCharacterTextSplitter

from regparse_kit.errors import ChunkingError
from regparse_kit.observability import names
from regparse_kit.observability.base import MetricsHook, NoOpMetricsHook

logger = logging.getLogger(__name__)

# Rough approximation: ~4 characters per token for English text
CHARS_PER_TOKEN = 4

DEFAULT_MAX_TOKENS = 30_000


@dataclass(frozen=True)
class ChunkingConfig:
    """Configuration for document chunking.

    Semantic breaks first: paragraph, line, sentence, word, character.
    """

    chunk_size: int = 8_000
    chunk_overlap: int = 1_000
    separators: tuple[str, ...] = ("\n\n", "\n", ". ", " ", "")

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        if self.chunk_overlap < 0:
            raise ValueError("overlap must be >= 0")
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("overlap must be < chunk_size")


@dataclass(frozen=True)
class DocumentChunk:
    content: str
    index: int
    start_char: int
    end_char: int
    total_chunks: int


class DocumentChunker:
    def __init__(
        self,
        config: ChunkingConfig = ChunkingConfig(),
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self.config = config
        self.metrics_hook = metrics_hook
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=config.chunk_size,
            chunk_overlap=config.chunk_overlap,
            separators=list(config.separators),
        )

    def estimate_size(self, text: str) -> int:
        """Heuristic token count. Never exact."""
        return math.ceil(len(text) / CHARS_PER_TOKEN)

    def exceeds_limit(self, text: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> bool:
        return self.estimate_size(text) > max_tokens

    def split(self, text: str) -> list[DocumentChunk]:
        """Split a document into overlapping chunks.

        Text whose length is at most ``chunk_size`` (boundary inclusive) is
        returned whole as a single chunk. Offsets are best effort: each chunk is assumed to start
        ``chunk_overlap`` characters before the previous one ended.

        Raises:
            ChunkingError: If the underlying splitter fails.
        """
        start = monotonic()

        if len(text) <= self.config.chunk_size:
            chunks = [
                DocumentChunk(
                    content=text,
                    index=0,
                    start_char=0,
                    end_char=len(text),
                    total_chunks=1,
                )
            ]
        else:
            try:
                pieces = self._splitter.split_text(text)
            except Exception as exc:
                logger.error("Document chunking failed: %s", exc)
                raise ChunkingError(f"Failed to chunk document: {exc}") from exc

            chunks = []
            position = 0
            for index, piece in enumerate(pieces):
                end = position + len(piece)
                chunks.append(
                    DocumentChunk(
                        content=piece,
                        index=index,
                        start_char=position,
                        end_char=end,
                        total_chunks=len(pieces),
                    )
                )
                position = max(0, end - self.config.chunk_overlap)

        elapsed_ms = 1000 * (monotonic() - start)
        self.metrics_hook.record_latency(names.CHUNKING_DURATION, elapsed_ms)
        self.metrics_hook.increment(names.CHUNKING_CHUNKS_CREATED, len(chunks))
        logger.info(
            "Split document of %d chars into %d chunks", len(text), len(chunks)
        )
        return chunks
