"""Image upload endpoint for staging attachments.

Validates and encodes an image so the client can send it with its next
chat request. Nothing is stored server-side.
"""

import logging

from fastapi import APIRouter, HTTPException, UploadFile, status

from research_chat.attachments.encoder import (
    MAX_ATTACHMENT_SIZE,
    AttachmentRejectedError,
    AttachmentTooLargeError,
    encode_attachment,
)
from research_chat.models.schemas import AttachmentUploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])


async def _read_bounded(file: UploadFile) -> bytes:
    """Read at most one byte past the size limit.

    Anything longer than MAX_ATTACHMENT_SIZE is rejected by the encoder,
    so the rest of the body is never buffered.
    """
    return await file.read(MAX_ATTACHMENT_SIZE + 1)


@router.post("/image", response_model=AttachmentUploadResponse)
async def upload_image(file: UploadFile) -> AttachmentUploadResponse:
    """Validate an image and return it as a base64 attachment.

    Args:
        file: The uploaded image (multipart/form-data).

    Returns:
        AttachmentUploadResponse with the encoded attachment.

    Raises:
        400: Empty file or not an image.
        413: File exceeds the 5MB limit.
    """
    filename = file.filename or "attachment"
    content = await _read_bounded(file)

    try:
        attachment = encode_attachment(content, file.content_type or "")
    except AttachmentTooLargeError as e:
        logger.warning(f"Rejected oversized upload {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=str(e),
        ) from e
    except AttachmentRejectedError as e:
        logger.warning(f"Rejected upload {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    logger.info(f"Staged attachment {filename} ({len(content)} bytes)")
    return AttachmentUploadResponse(filename=filename, size=len(content), attachment=attachment)
