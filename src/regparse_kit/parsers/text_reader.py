# src/regparse_kit/parsers/text_reader.py

import logging
from pathlib import Path

from bs4 import BeautifulSoup

from regparse_kit.errors import DocumentReadError

from .base import DocumentReader, Source, source_name
from .models import SourceDocument

logger = logging.getLogger(__name__)

HTML_SUFFIXES = (".html", ".htm", ".xhtml")


class TextReader(DocumentReader):
    """Reads UTF-8 plain text and HTML. Markup is reduced to its visible text."""

    suffixes = (".txt", ".md", *HTML_SUFFIXES)

    def read(self, source: Source) -> SourceDocument:
        name = source_name(source)
        try:
            if isinstance(source, str | Path):
                raw = Path(source).read_bytes()
            else:
                raw = source.read()
        except OSError as exc:
            raise DocumentReadError(f"Failed to read {name}: {exc}") from exc

        text = raw.decode("utf-8", errors="replace")
        if Path(name).suffix.lower() in HTML_SUFFIXES:
            return SourceDocument(
                name=name,
                text=html_to_text(text),
                metadata={"source_type": "html"},
            )
        return SourceDocument(name=name, text=text, metadata={"source_type": "text"})


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return soup.get_text("\n")
