# src/regparse_kit/streaming/schema.py

"""Document structure records produced from model output.

``HierarchyNode`` is the single definition of a valid node shape. Both the
incremental extractor and the recovery parser go through ``validate_node``.
"""

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)


def _text_or_empty(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class ReferenceRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    target: str = ""
    text: str = ""
    type: Literal["internal", "external"] = "internal"

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        # Bare strings are taken as the target id.
        if isinstance(data, str):
            data = {"target": data, "text": data}
        elif not isinstance(data, dict):
            return data

        data = dict(data)
        for field in ("target", "text"):
            if field in data:
                data[field] = _text_or_empty(data[field])
        kind = data.get("type")
        if isinstance(kind, str) and kind.lower() in ("internal", "external"):
            data["type"] = kind.lower()
        else:
            data["type"] = "external" if data.get("target") == "external" else "internal"
        return data


def _lenient_references(value: Any) -> Any:
    # Only the array itself is required; unusable items are dropped.
    if not isinstance(value, list):
        return value
    references = []
    for item in value:
        if not isinstance(item, (str, dict)):
            continue
        try:
            references.append(ReferenceRecord.model_validate(item))
        except ValidationError:
            continue
    return references


def _lenient_children(value: Any) -> Any:
    # Descendants get defaults for missing arrays; children that still do not
    # fit the node shape are dropped without failing their parent.
    if not isinstance(value, list):
        return value
    children = []
    for item in value:
        if not isinstance(item, dict):
            continue
        item = dict(item)
        for field in ("references", "children"):
            if not isinstance(item.get(field), list):
                item[field] = []
        try:
            children.append(HierarchyNode.model_validate(item))
        except ValidationError:
            continue
    return children


class HierarchyNode(BaseModel):
    """One structural unit: part, section, subsection, paragraph."""

    model_config = ConfigDict(extra="allow")

    id: StrictStr
    type: StrictStr
    number: str = ""
    title: str = ""
    text: str = ""
    level: int
    references: list[ReferenceRecord]
    children: list["HierarchyNode"]

    @field_validator("number", "title", "text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _text_or_empty(value)

    @field_validator("references", mode="before")
    @classmethod
    def _usable_references(cls, value: Any) -> Any:
        return _lenient_references(value)

    @field_validator("children", mode="before")
    @classmethod
    def _usable_children(cls, value: Any) -> Any:
        return _lenient_children(value)

    @field_validator("level", mode="before")
    @classmethod
    def _numeric_level(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("level must be a number")
        return int(value)


class DocumentMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    jurisdiction: str = ""
    document_type: str = ""
    source: str = ""

    @field_validator("title", "jurisdiction", "document_type", "source", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _text_or_empty(value)


class ParsedDocument(BaseModel):
    """Shape of every ``complete`` payload."""

    metadata: DocumentMetadata
    hierarchy: list[HierarchyNode] = []


@dataclass(frozen=True)
class NodeValidation:
    node: HierarchyNode | None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.node is not None


def validate_node(data: Any) -> NodeValidation:
    """Check a decoded JSON value against the node shape.

    Requires string ``id`` and ``type``, numeric ``level`` and array
    ``references`` and ``children`` on the value itself. Descendants missing
    those arrays get empty ones; reference items or children that are still
    unusable are dropped rather than rejecting the node.
    """
    try:
        return NodeValidation(node=HierarchyNode.model_validate(data))
    except ValidationError as exc:
        return NodeValidation(node=None, error=str(exc))


def validate_metadata(data: Any) -> DocumentMetadata | None:
    if not isinstance(data, dict):
        return None
    try:
        return DocumentMetadata.model_validate(data)
    except ValidationError:
        return None


def placeholder_metadata() -> DocumentMetadata:
    """Metadata used when a stream finished without proposing any."""
    return DocumentMetadata(
        title="Processed Document",
        jurisdiction="Unknown",
        document_type="Document",
        source="Streaming Parse",
    )


def failure_metadata() -> DocumentMetadata:
    """Metadata used when nothing at all could be recovered."""
    return DocumentMetadata(
        title="Document Parsing Failed",
        jurisdiction="Unknown",
        document_type="Unknown",
        source="Unknown",
    )
