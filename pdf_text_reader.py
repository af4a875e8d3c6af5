"""
Document Text Reader

Supplies raw text to the ingest pipeline. Text-selectable PDFs are read with
pdfplumber, falling back to PyPDF2 when pdfplumber fails or yields no text.
Plain-text exports are read directly.
"""

import logging
from pathlib import Path
from typing import List, Union

import pdfplumber
import PyPDF2

logger = logging.getLogger(__name__)


class DocumentReadError(Exception):
    """Raised when a document cannot be turned into text."""


def _extract_with_pdfplumber(pdf_path: Path) -> str:
    page_texts: List[str] = []
    with pdfplumber.open(pdf_path) as pdf:
        for page in pdf.pages:
            page_texts.append(page.extract_text() or "")
    return "\n".join(page_texts)


def _extract_with_pypdf2(pdf_path: Path) -> str:
    page_texts: List[str] = []
    with open(pdf_path, 'rb') as file:
        pdf_reader = PyPDF2.PdfReader(file)
        for page in pdf_reader.pages:
            page_texts.append(page.extract_text() or "")
    return "\n".join(page_texts)


def read_pdf_text(pdf_path: Path) -> str:
    """
    Extract text from a text-selectable PDF.

    Args:
        pdf_path: Path to the PDF file

    Returns:
        Text of all pages joined with newlines

    Raises:
        DocumentReadError: If neither extractor can read the file
    """
    try:
        text = _extract_with_pdfplumber(pdf_path)
        if text.strip():
            return text
        logger.info(f"pdfplumber found no text in {pdf_path.name}; trying PyPDF2")
    except Exception as e:
        logger.warning(f"pdfplumber extraction failed for {pdf_path.name}: {e}")

    try:
        return _extract_with_pypdf2(pdf_path)
    except Exception as e:
        raise DocumentReadError(f"Could not extract text from {pdf_path}: {e}") from e


def read_document_text(path: Union[str, Path]) -> str:
    """
    Read the text of a PDF or plain-text document.

    Args:
        path: Document path

    Returns:
        Document text

    Raises:
        FileNotFoundError: If the path does not exist
        DocumentReadError: If the file type is unsupported or unreadable
    """
    document_path = Path(path)

    if not document_path.exists():
        raise FileNotFoundError(f"Document not found: {document_path}")

    suffix = document_path.suffix.lower()
    if suffix == '.txt':
        try:
            return document_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(f"Could not read {document_path}: {e}") from e

    if suffix == '.pdf':
        return read_pdf_text(document_path)

    raise DocumentReadError(f"Unsupported document type '{suffix}': {document_path}")
