# src/regparse_kit/observability/names.py

"""Standard metric names for regparse-kit observability.

Use these constants instead of hardcoded strings for consistency
across the codebase.

Note: All duration metrics are in milliseconds by convention.
Units are handled by the metrics backend (e.g., converted to seconds in Prometheus).
"""

# ============================================================================
# LLM Metrics
# ============================================================================

# Duration (time until the stream is exhausted)
LLM_STREAM_DURATION = "llm_stream_duration"

# Counters
LLM_REQUESTS_TOTAL = "llm_requests_total"
LLM_ERRORS_TOTAL = "llm_errors_total"
LLM_FRAGMENTS_TOTAL = "llm_fragments_total"


# ============================================================================
# Chunking Metrics
# ============================================================================

# Duration
CHUNKING_DURATION = "chunking_duration"

# Counters (chunks accumulate over time)
CHUNKING_CHUNKS_CREATED = "chunking_chunks_created"


# ============================================================================
# Streaming Metrics
# ============================================================================

# Duration (whole process_document invocation)
STREAM_DOCUMENT_DURATION = "stream_document_duration"

# Counters
STREAM_FRAGMENTS_TOTAL = "stream_fragments_total"
STREAM_NODES_EMITTED_TOTAL = "stream_nodes_emitted_total"
STREAM_CHUNKS_PROCESSED_TOTAL = "stream_chunks_processed_total"
STREAM_EXTRACTION_ERRORS_TOTAL = "stream_extraction_errors_total"
STREAM_ERRORS_TOTAL = "stream_errors_total"

# Counters (labelled by strategy)
STREAM_RECOVERY_TOTAL = "stream_recovery_total"

# Gauges
STREAM_MERGED_NODES = "stream_merged_nodes"
