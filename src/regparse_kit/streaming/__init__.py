from .events import EventType, ParseEvent, ProgressEvent, StreamEvent
from .extractor import (
    ParsePhase,
    StreamingExtractor,
    StreamingParseState,
    extract_metadata,
    extract_nodes,
    is_parse_complete,
    process_chunk,
)
from .merge import merge_children, merge_hierarchies, merge_node
from .orchestrator import StreamingConfig, StreamOrchestrator
from .recovery import RecoveryParser, RecoveryResult, RecoveryStrategy, recover
from .schema import (
    DocumentMetadata,
    HierarchyNode,
    ParsedDocument,
    ReferenceRecord,
)

__all__ = [
    "DocumentMetadata",
    "EventType",
    "HierarchyNode",
    "ParseEvent",
    "ParsePhase",
    "ParsedDocument",
    "ProgressEvent",
    "RecoveryParser",
    "RecoveryResult",
    "RecoveryStrategy",
    "ReferenceRecord",
    "StreamEvent",
    "StreamOrchestrator",
    "StreamingConfig",
    "StreamingExtractor",
    "StreamingParseState",
    "extract_metadata",
    "extract_nodes",
    "is_parse_complete",
    "merge_children",
    "merge_hierarchies",
    "merge_node",
    "process_chunk",
    "recover",
]
