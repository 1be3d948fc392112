from pathlib import Path

import pytest
from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas

from regparse_kit.parsers.models import SourceDocument
from regparse_kit.parsers.pdf_reader import PdfReader


def _write_pages(path: Path, pages: list[list[str]]) -> None:
    c = canvas.Canvas(str(path), pagesize=LETTER)
    _, height = LETTER

    for lines in pages:
        text = c.beginText(40, height - 50)
        for line in lines:
            text.textLine(line)
        c.drawText(text)
        c.showPage()

    c.save()


def _create_statute_pdf(path: Path) -> None:
    """Creates a deterministic single-page statute for integration testing."""
    _write_pages(
        path,
        [
            [
                "SAMPLE PROTECTION ACT",
                "PART I - PRELIMINARY",
                "1. Short title and commencement",
                "(1) This Act may be cited as the Sample Protection Act.",
                "(2) It comes into force as provided under section 9.",
            ]
        ],
    )


def _create_multipage_pdf(path: Path) -> None:
    """Creates a three-page statute with page footers and a blank page."""
    _write_pages(
        path,
        [
            ["PART I - PRELIMINARY", "1. Short title", "Page 1"],
            [],
            ["PART II - OFFENCES", "9. Commencement", "Page 3"],
        ],
    )


@pytest.fixture(scope="module")
def pdf_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Create all test PDFs once per module."""
    dir_path: Path = tmp_path_factory.mktemp("pdfs")

    _create_statute_pdf(dir_path / "statute.pdf")
    _create_multipage_pdf(dir_path / "multipage.pdf")
    (dir_path / "broken.pdf").write_bytes(b"this is not a pdf")

    return dir_path


@pytest.fixture(scope="module")
def read_statute(pdf_dir: Path) -> SourceDocument:
    """Read statute PDF once, reuse across tests."""
    with open(pdf_dir / "statute.pdf", "rb") as f:
        return PdfReader().read(f)


@pytest.fixture(scope="module")
def read_multipage(pdf_dir: Path) -> SourceDocument:
    """Read multipage PDF once, reuse across tests."""
    return PdfReader().read(pdf_dir / "multipage.pdf")
