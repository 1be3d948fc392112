from pathlib import Path

import pytest

from regparse_kit.errors import DocumentReadError
from regparse_kit.parsers.cleaning import clean_document_text
from regparse_kit.parsers.models import SourceDocument
from regparse_kit.parsers.pdf_reader import PdfReader

# --- Document-level tests ---


def test_name_comes_from_open_file(read_statute: SourceDocument) -> None:
    assert read_statute.name == "statute.pdf"


def test_sets_pdf_metadata(read_statute: SourceDocument) -> None:
    assert read_statute.metadata == {"source_type": "pdf", "pages": 1}


def test_extracts_lines_in_order(read_statute: SourceDocument) -> None:
    lines = [line.strip() for line in read_statute.text.splitlines()]

    assert lines[0] == "SAMPLE PROTECTION ACT"
    assert lines.index("PART I - PRELIMINARY") < lines.index(
        "1. Short title and commencement"
    )
    assert "(2) It comes into force as provided under section 9." in lines


# --- Multi-page tests ---


def test_pages_are_joined_with_newlines(read_multipage: SourceDocument) -> None:
    assert read_multipage.metadata["pages"] == 3
    assert read_multipage.name == "multipage.pdf"
    assert read_multipage.text.index("1. Short title") < read_multipage.text.index(
        "9. Commencement"
    )


def test_cleaning_strips_page_footers(read_multipage: SourceDocument) -> None:
    cleaned = clean_document_text(read_multipage.text)

    assert cleaned == (
        "PART I - PRELIMINARY 1. Short title PART II - OFFENCES 9. Commencement"
    )


# --- Determinism and errors ---


def test_reading_is_deterministic(pdf_dir: Path) -> None:
    reader = PdfReader()

    first = reader.read(pdf_dir / "statute.pdf")
    second = reader.read(pdf_dir / "statute.pdf")

    assert first == second


def test_broken_pdf_raises(pdf_dir: Path) -> None:
    with pytest.raises(DocumentReadError, match="broken.pdf"):
        PdfReader().read(pdf_dir / "broken.pdf")


def test_missing_pdf_raises(pdf_dir: Path) -> None:
    with pytest.raises(DocumentReadError):
        PdfReader().read(pdf_dir / "absent.pdf")
