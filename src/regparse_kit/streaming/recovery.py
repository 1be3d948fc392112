# src/regparse_kit/streaming/recovery.py

"""Best-effort recovery of a final model buffer that never parsed cleanly.

Strategies are tried from least to most destructive and the first one whose
output parses as JSON wins. ``recover`` never raises: when every strategy
fails it returns placeholder metadata and an empty hierarchy.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from regparse_kit.observability import names
from regparse_kit.observability.base import MetricsHook, NoOpMetricsHook

from .extractor import extract_metadata
from .scanner import count_quotes, find_root_key_value, iter_structure
from .schema import (
    HierarchyNode,
    ParsedDocument,
    failure_metadata,
    placeholder_metadata,
    validate_metadata,
    validate_node,
)

logger = logging.getLogger(__name__)

TRUNCATION_FRACTIONS = (0.95, 0.9, 0.8, 0.7, 0.6, 0.5, 0.4, 0.3)

# A snapped cut point must keep at least this share of the target length.
SNAP_THRESHOLD = 0.8

_CLOSERS = {"{": "}", "[": "]"}

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_OPEN_FENCE = re.compile(r"```(?:json)?\s*(.*)$", re.DOTALL | re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_BARE_KEY = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)(\s*:)")
_SINGLE_QUOTED_VALUE = re.compile(r"(:\s*)'([^'\"\\]*)'")
_DANGLING_KEY = re.compile(r'([{,])\s*"(?:[^"\\]|\\.)*"\s*(?::\s*)?$')
_SAFE_BOUNDARY = re.compile(r"\},|\}|\]")


class RecoveryStrategy(str, Enum):
    DIRECT = "direct"
    FENCED = "fenced"
    PATCHED = "patched"
    TRUNCATED = "truncated"
    METADATA_ONLY = "metadata_only"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RecoveryResult:
    document: ParsedDocument
    strategy: RecoveryStrategy
    source_length: int
    # False when document.metadata is a placeholder.
    metadata_found: bool = False

    @property
    def is_partial(self) -> bool:
        return self.strategy in (
            RecoveryStrategy.METADATA_ONLY,
            RecoveryStrategy.FALLBACK,
        )

    @property
    def is_failure(self) -> bool:
        return self.strategy is RecoveryStrategy.FALLBACK


class RecoveryParser:
    def __init__(self, metrics_hook: MetricsHook = NoOpMetricsHook()) -> None:
        self.metrics_hook = metrics_hook

    def recover(self, text: str) -> RecoveryResult:
        try:
            result = self._run_ladder(text)
        except Exception:
            logger.exception("Recovery raised unexpectedly, using fallback")
            result = _fallback(text)

        self.metrics_hook.increment(
            names.STREAM_RECOVERY_TOTAL, labels={"strategy": result.strategy.value}
        )
        if result.is_failure:
            logger.warning(
                "Recovery exhausted for buffer of %d chars", result.source_length
            )
        else:
            logger.info(
                "Recovered %d top-level nodes via %s",
                len(result.document.hierarchy),
                result.strategy.value,
            )
        return result

    def _run_ladder(self, text: str) -> RecoveryResult:
        span = outer_object(text)

        if span is not None:
            parsed = _try_parse(span)
            if parsed is not None:
                return _result(parsed, RecoveryStrategy.DIRECT, text)

        fenced = fenced_block(text)
        if fenced is not None:
            parsed = _try_parse(fenced)
            if parsed is not None:
                return _result(parsed, RecoveryStrategy.FENCED, text)

        # An unclosed root has no last "}" worth trusting; repair from its "{".
        start = text.find("{")
        body = span if span is not None and _is_balanced(span) else None
        if body is None and start >= 0:
            body = text[start:]

        if body is not None:
            parsed = _try_parse(patch_syntax(body))
            if parsed is not None:
                return _result(parsed, RecoveryStrategy.PATCHED, text)

            for fraction in TRUNCATION_FRACTIONS:
                candidate = truncate_at_boundary(body, fraction)
                if not candidate:
                    continue
                parsed = _try_parse(balance(candidate))
                if parsed is not None:
                    logger.debug("Truncation at %.0f%% parsed", fraction * 100)
                    return _result(parsed, RecoveryStrategy.TRUNCATED, text)

        metadata = extract_metadata(text)
        if metadata is not None and find_root_key_value(text, "hierarchy") is not None:
            document = ParsedDocument(metadata=metadata, hierarchy=[])
            return RecoveryResult(
                document=document,
                strategy=RecoveryStrategy.METADATA_ONLY,
                source_length=len(text),
                metadata_found=True,
            )

        return _fallback(text)


def recover(text: str, metrics_hook: MetricsHook = NoOpMetricsHook()) -> RecoveryResult:
    return RecoveryParser(metrics_hook=metrics_hook).recover(text)


def outer_object(text: str) -> str | None:
    """First ``{`` to last ``}``, inclusive."""
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end <= start:
        return None
    return text[start : end + 1]


def fenced_block(text: str) -> str | None:
    match = _FENCED_BLOCK.search(text)
    if match is None:
        # A stream cut short may never close its fence.
        match = _OPEN_FENCE.search(text)
    if match is None:
        return None
    return match.group(1).strip() or None


def patch_syntax(text: str) -> str:
    """Apply the common syntax fixes, then balance quotes and brackets."""
    patched = _TRAILING_COMMA.sub(r"\1", text)
    patched = _BARE_KEY.sub(r'\1"\2"\3', patched)
    patched = _SINGLE_QUOTED_VALUE.sub(r'\1"\2"', patched)
    return balance(patched)


def balance(text: str) -> str:
    """Close an unterminated string and every open object or array.

    With an odd quote count the text is first cut back to the last complete
    ``",`` field boundary. A closer that does not match the innermost open
    container closes the inner containers first; a closer with nothing to
    close is dropped. A dangling comma or key is removed before the final
    closers are appended.
    """
    if count_quotes(text) % 2 == 1:
        boundary = text.rfind('",')
        if boundary > 0:
            text = text[: boundary + 1]
        else:
            text += '"'

    stack: list[str] = []
    pieces: list[str] = []
    last = 0
    in_string = False
    for index, char in iter_structure(text):
        if char == '"':
            in_string = not in_string
            continue
        if char in _CLOSERS:
            stack.append(char)
            continue
        opener = "{" if char == "}" else "["
        if opener not in stack:
            pieces.append(text[last:index])
            last = index + 1
            continue
        if stack[-1] != opener:
            pieces.append(text[last:index])
            while stack[-1] != opener:
                pieces.append(_CLOSERS[stack.pop()])
            last = index
        stack.pop()
    pieces.append(text[last:])

    repaired = "".join(pieces)
    if in_string:
        repaired += '"'
    repaired = _strip_dangling(repaired, inside_object=bool(stack) and stack[-1] == "{")
    return repaired + "".join(_CLOSERS[opener] for opener in reversed(stack))


def truncate_at_boundary(text: str, fraction: float) -> str:
    """Cut ``text`` to ``fraction`` of its length, snapped to a safe boundary.

    The cut moves back to the end of the last ``},``, ``}`` or ``]`` when
    that boundary still keeps more than 80% of the target length.
    """
    cut = int(len(text) * fraction)
    candidate = text[:cut]
    boundary = -1
    for match in _SAFE_BOUNDARY.finditer(candidate):
        # Keep the brace of "}," but not the comma.
        boundary = match.start() + 1
    if boundary > cut * SNAP_THRESHOLD:
        candidate = candidate[:boundary]
    return candidate


def to_document(data: Any) -> ParsedDocument:
    """Coerce any decoded JSON value into a well-formed ParsedDocument."""
    if not isinstance(data, dict):
        return ParsedDocument(metadata=placeholder_metadata(), hierarchy=[])

    metadata = validate_metadata(data.get("metadata")) or placeholder_metadata()
    raw_hierarchy = data.get("hierarchy")
    hierarchy: list[HierarchyNode] = []
    if isinstance(raw_hierarchy, list):
        dropped = 0
        for item in raw_hierarchy:
            validation = validate_node(item)
            if validation.node is None:
                dropped += 1
                continue
            hierarchy.append(validation.node)
        if dropped:
            logger.warning("Dropped %d nodes with invalid shape", dropped)
    return ParsedDocument(metadata=metadata, hierarchy=hierarchy)


def _strip_dangling(text: str, *, inside_object: bool) -> str:
    text = text.rstrip().rstrip(",").rstrip()
    if text.endswith(":"):
        text = text[:-1].rstrip()
        inside_object = True
    if inside_object:
        match = _DANGLING_KEY.search(text)
        if match is not None and match.group(1) == ",":
            text = text[: match.start()]
        elif match is not None:
            text = text[: match.start() + 1]
    return text.rstrip().rstrip(",")


def _is_balanced(text: str) -> bool:
    depth = 0
    for _, char in iter_structure(text):
        if char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
    return depth == 0


def _try_parse(text: str) -> Any | None:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        return None


def _result(data: Any, strategy: RecoveryStrategy, text: str) -> RecoveryResult:
    found = isinstance(data, dict) and validate_metadata(data.get("metadata")) is not None
    return RecoveryResult(
        document=to_document(data),
        strategy=strategy,
        source_length=len(text),
        metadata_found=found,
    )


def _fallback(text: str) -> RecoveryResult:
    return RecoveryResult(
        document=ParsedDocument(metadata=failure_metadata(), hierarchy=[]),
        strategy=RecoveryStrategy.FALLBACK,
        source_length=len(text),
    )
