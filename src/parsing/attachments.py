"""Attachment validation and encoding.

Turns an uploaded file into an ``Attachment`` ready to embed in a chat
message: images become base64 data URLs, documents become plain text.
"""

import base64
import binascii
import logging

from src.models.schemas import Attachment, AttachmentKind
from src.parsing.pdf_parser import PDFParseError, extract_pdf_text

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
ALLOWED_DOCUMENT_TYPES = ("text/plain", "application/pdf", "text/markdown")

SIZE_ERROR = "File size must be less than 10MB"
TYPE_ERROR = "Only images (JPEG, PNG, GIF, WebP) and documents (TXT, PDF, MD) are allowed"

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


class AttachmentError(Exception):
    """Raised when a file cannot be turned into an attachment."""

    pass


def _normalize_mime(mime_type: str | None) -> str:
    # Browsers may append parameters, e.g. "text/plain; charset=utf-8"
    return (mime_type or "").split(";", 1)[0].strip().lower()


def is_image_type(mime_type: str | None) -> bool:
    return _normalize_mime(mime_type) in ALLOWED_IMAGE_TYPES


def is_document_type(mime_type: str | None) -> bool:
    return _normalize_mime(mime_type) in ALLOWED_DOCUMENT_TYPES


def validate_file(mime_type: str | None, size: int) -> None:
    """Check a file's size and type before reading it.

    Args:
        mime_type: Declared content type of the file.
        size: File size in bytes.

    Raises:
        AttachmentError: If the file is too large or of an unsupported type.
    """
    if size > MAX_FILE_SIZE:
        raise AttachmentError(SIZE_ERROR)

    if not is_image_type(mime_type) and not is_document_type(mime_type):
        raise AttachmentError(TYPE_ERROR)


def to_data_url(content: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{_normalize_mime(mime_type)};base64,{encoded}"


def decode_data_url(data_url: str) -> bytes:
    """Decode a base64 data URL back to raw bytes.

    Args:
        data_url: A ``data:<mime>;base64,<payload>`` string.

    Returns:
        The decoded payload.

    Raises:
        AttachmentError: If the string is not a base64 data URL.
    """
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise AttachmentError("Invalid data URL")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AttachmentError(f"Invalid data URL: {e}") from e


def _document_text(name: str, mime_type: str, content: bytes) -> str:
    if _normalize_mime(mime_type) == "application/pdf":
        try:
            return extract_pdf_text(content)
        except PDFParseError as e:
            logger.warning(f"PDF parse error for {name}: {e}")
            raise AttachmentError(str(e)) from e

    return content.decode("utf-8", errors="replace")


def process_file(name: str, mime_type: str | None, content: bytes) -> Attachment:
    """Validate a file and convert it into an attachment.

    Args:
        name: Original filename.
        mime_type: Declared content type.
        content: Raw file bytes.

    Returns:
        Attachment carrying a data URL (images) or text content (documents).

    Raises:
        AttachmentError: If validation or conversion fails.
    """
    validate_file(mime_type, len(content))

    if is_image_type(mime_type):
        return Attachment(
            kind=AttachmentKind.IMAGE,
            name=name,
            size=len(content),
            data_url=to_data_url(content, mime_type or ""),
        )

    return Attachment(
        kind=AttachmentKind.DOCUMENT,
        name=name,
        size=len(content),
        text_content=_document_text(name, mime_type or "", content),
    )


def format_file_size(num_bytes: int) -> str:
    """Render a byte count for display, e.g. ``1.5 KB``."""
    if num_bytes <= 0:
        return "0 Bytes"
    index = 0
    while num_bytes >= 1024 ** (index + 1) and index < len(_SIZE_UNITS) - 1:
        index += 1
    value = round(num_bytes / (1024**index), 2)
    return f"{value:g} {_SIZE_UNITS[index]}"
