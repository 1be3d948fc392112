# src/regparse_kit/parsers/pdf_reader.py

import logging
from typing import Any, cast

import pdfplumber
from pdfplumber.utils.exceptions import PdfminerException

from regparse_kit.errors import DocumentReadError

from .base import DocumentReader, Source, source_name
from .models import SourceDocument

logger = logging.getLogger(__name__)


class PdfReader(DocumentReader):
    """
    Deterministic PDF text reader.
    - Uses page order
    - Pages are joined with a newline
    - Pages without a text layer contribute an empty line
    """

    suffixes = (".pdf",)

    def read(self, source: Source) -> SourceDocument:
        name = source_name(source)
        try:
            # pdfplumber.open accepts path-like or buffer objects; cast to Any
            with pdfplumber.open(cast(Any, source)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except (OSError, PdfminerException) as exc:
            raise DocumentReadError(f"Failed to read PDF {name}: {exc}") from exc

        empty = sum(1 for page in pages if not page.strip())
        if empty:
            logger.warning("%d of %d pages in %s have no text", empty, len(pages), name)
        logger.info("Read PDF %s: %d pages", name, len(pages))

        return SourceDocument(
            name=name,
            text="\n".join(pages),
            metadata={"source_type": "pdf", "pages": len(pages)},
        )
