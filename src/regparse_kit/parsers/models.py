# src/regparse_kit/parsers/models.py

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SourceDocument:
    name: str
    text: str
    metadata: dict = field(default_factory=dict)
