from .base import DocumentReader
from .cleaning import clean_document_text
from .models import SourceDocument
from .pdf_reader import PdfReader
from .text_reader import TextReader

__all__ = [
    "DocumentReader",
    "PdfReader",
    "SourceDocument",
    "TextReader",
    "clean_document_text",
]
