"""Image attachment encoding with validation.

Turns an uploaded image into a base64 payload plus its media type, ready to
be sent inline to the agent.
"""

import base64
import binascii
import logging
import re

from research_chat.models.schemas import Attachment

logger = logging.getLogger(__name__)

# Constants
MAX_ATTACHMENT_SIZE = 5 * 1024 * 1024  # 5MB
MAX_ATTACHMENT_SIZE_MB = MAX_ATTACHMENT_SIZE // (1024 * 1024)
ACCEPTED_MEDIA_PREFIX = "image/"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?:;[^,]*)?;base64,", re.IGNORECASE)


class AttachmentRejectedError(ValueError):
    """Raised when a file cannot be staged as an attachment."""

    pass


class AttachmentTooLargeError(AttachmentRejectedError):
    """Raised when a file exceeds MAX_ATTACHMENT_SIZE."""

    pass


def _validate_attachment(size: int, mime_type: str) -> None:
    """Validate file size and media type before encoding.

    Args:
        size: File size in bytes.
        mime_type: Declared media type.

    Raises:
        AttachmentRejectedError: If validation fails.
    """
    if size == 0:
        raise AttachmentRejectedError("Empty file provided")

    if size > MAX_ATTACHMENT_SIZE:
        size_mb = size / (1024 * 1024)
        raise AttachmentTooLargeError(
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed "
            f"({MAX_ATTACHMENT_SIZE_MB}MB)"
        )

    if not mime_type or not mime_type.lower().startswith(ACCEPTED_MEDIA_PREFIX):
        raise AttachmentRejectedError(
            f"Unsupported media type: {mime_type or 'unknown'} (only images are accepted)"
        )


def strip_data_uri_prefix(data: str) -> str:
    """Remove a leading ``data:<mime>;base64,`` prefix, if any."""
    return _DATA_URI_RE.sub("", data, count=1)


def encode_attachment(content: bytes, mime_type: str) -> Attachment:
    """Validate an image file and encode it as a base64 attachment.

    Args:
        content: Raw bytes of the file.
        mime_type: Declared media type of the file.

    Returns:
        Attachment with the pure base64 payload and the media type.

    Raises:
        AttachmentRejectedError: If the file is empty, too large, or not an image.
    """
    _validate_attachment(len(content), mime_type)

    payload = base64.b64encode(content).decode("ascii")
    logger.debug(f"Encoded {mime_type} attachment ({len(content)} bytes)")

    return Attachment(base64=payload, mime_type=mime_type)


def encode_data_url(data_url: str) -> Attachment:
    """Build an attachment from a browser-style data URL.

    The media type is taken from the prefix and the prefix is stripped
    from the stored payload.

    Raises:
        AttachmentRejectedError: If the URL is malformed or fails validation.
    """
    match = _DATA_URI_RE.match(data_url)
    if match is None:
        raise AttachmentRejectedError("Invalid data URL: missing base64 header")

    try:
        content = base64.b64decode(strip_data_uri_prefix(data_url), validate=True)
    except binascii.Error as e:
        raise AttachmentRejectedError(f"Invalid base64 payload: {e}") from e

    return encode_attachment(content, match.group("mime"))


def decode_attachment(attachment: Attachment) -> bytes:
    """Return the original bytes of an attachment."""
    return base64.b64decode(attachment.base64)


class AttachmentSlot:
    """Holds at most one attachment staged for the next outgoing message.

    A rejected file clears the slot, so a previously staged image is never
    sent by accident after a failed selection.
    """

    def __init__(self) -> None:
        self._attachment: Attachment | None = None

    @property
    def attachment(self) -> Attachment | None:
        return self._attachment

    @property
    def is_empty(self) -> bool:
        return self._attachment is None

    def stage(self, content: bytes, mime_type: str) -> Attachment:
        """Encode a file and stage it, replacing any staged attachment.

        Raises:
            AttachmentRejectedError: If the file fails validation. The slot
                is left empty.
        """
        self._attachment = None
        try:
            self._attachment = encode_attachment(content, mime_type)
        except AttachmentRejectedError as e:
            logger.info(f"Attachment rejected: {e}")
            raise
        return self._attachment

    def clear(self) -> None:
        self._attachment = None

    def take(self) -> Attachment | None:
        """Return the staged attachment and empty the slot."""
        attachment, self._attachment = self._attachment, None
        return attachment
