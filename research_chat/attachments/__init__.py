"""Attachment ingestion for the composer.

Responsibilities:
    - Size and media type validation (images up to 5MB)
    - Binary to base64 encoding, data-URI prefix stripping
    - Single-slot staging of the attachment for the next message
"""

from research_chat.attachments.encoder import (
    MAX_ATTACHMENT_SIZE,
    AttachmentRejectedError,
    AttachmentSlot,
    AttachmentTooLargeError,
    decode_attachment,
    encode_attachment,
    encode_data_url,
    strip_data_uri_prefix,
)

__all__ = [
    "MAX_ATTACHMENT_SIZE",
    "AttachmentRejectedError",
    "AttachmentSlot",
    "AttachmentTooLargeError",
    "decode_attachment",
    "encode_attachment",
    "encode_data_url",
    "strip_data_uri_prefix",
]
