# src/regparse_kit/parsers/cleaning.py

import re

_PAGE_MARKER = re.compile(r"Page\s*-?\s*\d+", re.IGNORECASE)
_NUMBER_ONLY_LINE = re.compile(r"^\s*\d+\s*$", re.MULTILINE)
_WHITESPACE = re.compile(r"\s+")


def clean_document_text(raw_text: str) -> str:
    """Strip page markers and bare page numbers, then collapse whitespace.

    The result is a single line; section structure survives through the
    document's own numbering.
    """
    text = _PAGE_MARKER.sub("", raw_text)
    text = _NUMBER_ONLY_LINE.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()
