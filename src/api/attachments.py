"""Attachment upload endpoint.

Validates an uploaded file and returns it encoded as an ``Attachment``
(data URL for images, plain text for documents) for the UI to embed in its
next chat message.
"""

import logging

from fastapi import APIRouter, HTTPException, UploadFile, status

from src.models.schemas import Attachment
from src.parsing.attachments import MAX_FILE_SIZE, SIZE_ERROR, AttachmentError, process_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/attachments", tags=["attachments"])


def _validate_filename(filename: str | None) -> str:
    """Validate that the upload carries a filename.

    Raises:
        HTTPException: 400 if the filename is missing.
    """
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )
    return filename


async def _read_and_validate_size(file: UploadFile) -> bytes:
    """Read file content and validate size.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=SIZE_ERROR,
        )

    return content


@router.post("", response_model=Attachment, response_model_exclude_none=True)
async def upload_attachment(file: UploadFile) -> Attachment:
    """Encode an uploaded file as a chat attachment.

    Args:
        file: The uploaded file (multipart/form-data).

    Returns:
        Attachment with a data URL (images) or text content (documents).

    Raises:
        400: Missing filename, unsupported type, or unreadable document.
        413: File exceeds 10MB limit.
    """
    filename = _validate_filename(file.filename)
    content = await _read_and_validate_size(file)

    try:
        attachment = process_file(filename, file.content_type, content)
    except AttachmentError as e:
        logger.warning(f"Rejected attachment {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    logger.info(f"Encoded attachment {filename} ({attachment.kind.value}, {len(content)} bytes)")
    return attachment
