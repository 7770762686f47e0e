"""File parsing utilities for chat attachments.

Turns uploaded files into content the tutor can read.

Responsibilities:
    - MIME type and size validation
    - Image encoding to base64 data URLs
    - Document decoding to plain text (PDF extraction with pypdf)
"""

from src.parsing.attachments import (
    AttachmentError,
    decode_data_url,
    format_file_size,
    process_file,
    validate_file,
)
from src.parsing.pdf_parser import PDFParseError, extract_pdf_text

__all__ = [
    "AttachmentError",
    "PDFParseError",
    "decode_data_url",
    "extract_pdf_text",
    "format_file_size",
    "process_file",
    "validate_file",
]
