"""Plain-text extraction from stored SOW files. PDFs are read with pypdf."""
import logging
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PyPdfError

logger = logging.getLogger(__name__)

PDF_MIME_TYPES = ("application/pdf", "application/x-pdf")


def _is_pdf(file_path: Path, mime_type: str | None) -> bool:
    return mime_type in PDF_MIME_TYPES or file_path.suffix.lower() == ".pdf"


def _extract_pdf_text(file_path: Path) -> str:
    try:
        reader = PdfReader(str(file_path))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except (PyPdfError, OSError, ValueError) as exc:
        logger.warning("PDF text extraction failed for %s: %s", file_path, exc)
        return ""


def extract_text_from_file(file_path: Path, mime_type: str | None) -> str:
    """Extract readable text from a stored SOW.

    PDFs always go through pypdf; their raw bytes are never returned as text.
    Anything else is read as UTF-8 and rejected when it looks binary.
    """
    if _is_pdf(file_path, mime_type):
        return _extract_pdf_text(file_path)

    try:
        text = file_path.read_text(encoding="utf-8", errors="ignore")
    except OSError as exc:
        logger.warning("Could not read %s as text: %s", file_path, exc)
        return ""

    printable = sum(1 for c in text if c.isprintable() or c.isspace())
    if text and printable / len(text) > 0.85:
        return text
    return ""
