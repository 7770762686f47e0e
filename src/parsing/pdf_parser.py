"""PDF text extraction for document attachments using pypdf."""

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"


class PDFParseError(Exception):
    """Raised when PDF parsing fails."""

    pass


def extract_pdf_text(file_content: bytes) -> str:
    """Extract the text of every page of a PDF.

    Pages that fail to extract are skipped. A PDF without a text layer
    (e.g. a scan) yields an empty string.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        Page texts joined by blank lines.

    Raises:
        PDFParseError: If the bytes are not a readable PDF with pages.
    """
    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = list(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if not pages:
        raise PDFParseError("PDF contains no pages")

    text_parts: list[str] = []
    for i, page in enumerate(pages):
        try:
            page_text = page.extract_text()
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue
        if page_text:
            text_parts.append(page_text)

    text = "\n\n".join(text_parts)
    if not text.strip():
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")
    return text
