from .chunking import ChunkingConfig, DocumentChunk, DocumentChunker

__all__ = [
    "ChunkingConfig",
    "DocumentChunk",
    "DocumentChunker",
]
