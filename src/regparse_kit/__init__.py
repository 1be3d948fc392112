# Chunking
from .chunking import ChunkingConfig, DocumentChunk, DocumentChunker

# Errors
from .errors import (
    ChunkingError,
    DocumentReadError,
    ExtractionError,
    ModelStreamError,
    RegParseError,
)

# LLMs
from .llms import LLMClient, LLMConfig, Message, Role, create_llm_client

# Observability
from .observability import InMemoryMetricsHook, MetricsHook, NoOpMetricsHook

# Readers
from .parsers import (
    DocumentReader,
    PdfReader,
    SourceDocument,
    TextReader,
    clean_document_text,
)

# Pipeline
from .pipeline import DocumentAnalyzer

# Prompts
from .prompts import Prompt, PromptsLibrary

# Streaming
from .streaming import (
    DocumentMetadata,
    EventType,
    HierarchyNode,
    ParsedDocument,
    ProgressEvent,
    RecoveryParser,
    RecoveryResult,
    ReferenceRecord,
    StreamEvent,
    StreamingConfig,
    StreamingExtractor,
    StreamingParseState,
    StreamOrchestrator,
    merge_hierarchies,
    process_chunk,
    recover,
)

__all__ = [
    # Chunking
    "ChunkingConfig",
    "DocumentChunk",
    "DocumentChunker",
    # Errors
    "ChunkingError",
    "DocumentReadError",
    "ExtractionError",
    "ModelStreamError",
    "RegParseError",
    # LLMs
    "LLMClient",
    "LLMConfig",
    "Message",
    "Role",
    "create_llm_client",
    # Observability
    "InMemoryMetricsHook",
    "MetricsHook",
    "NoOpMetricsHook",
    # Readers
    "DocumentReader",
    "PdfReader",
    "SourceDocument",
    "TextReader",
    "clean_document_text",
    # Pipeline
    "DocumentAnalyzer",
    # Prompts
    "Prompt",
    "PromptsLibrary",
    # Streaming
    "DocumentMetadata",
    "EventType",
    "HierarchyNode",
    "ParsedDocument",
    "ProgressEvent",
    "RecoveryParser",
    "RecoveryResult",
    "ReferenceRecord",
    "StreamEvent",
    "StreamOrchestrator",
    "StreamingConfig",
    "StreamingExtractor",
    "StreamingParseState",
    "merge_hierarchies",
    "process_chunk",
    "recover",
]
