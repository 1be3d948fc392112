# src/regparse_kit/parsers/base.py

from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from .models import SourceDocument

Source = str | Path | BinaryIO


class DocumentReader(ABC):
    # File suffixes this reader accepts, lowercase, dot included.
    suffixes: tuple[str, ...] = ()

    def accepts(self, path: str | Path) -> bool:
        return Path(path).suffix.lower() in self.suffixes

    @abstractmethod
    def read(self, source: Source) -> SourceDocument:
        """
        Read a document and return its raw text.

        Requirements:
        - Deterministic output for same input
        - No cleaning; callers run clean_document_text
        - Unreadable sources raise DocumentReadError
        """
        raise NotImplementedError


def source_name(source: Source) -> str:
    """File name of a path or of an opened file, ``"document"`` otherwise."""
    if isinstance(source, str | Path):
        return Path(source).name
    name = getattr(source, "name", None)
    if isinstance(name, str) and name:
        return Path(name).name
    return "document"
