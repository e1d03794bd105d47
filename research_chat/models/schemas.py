"""Pydantic models for the chat transcript, agent snapshots and API payloads."""

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def new_id() -> str:
    """Return a fresh opaque identifier for messages and sessions."""
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MessageRole(str, Enum):
    """Speaker of a transcript message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class TurnStatus(str, Enum):
    """Status values for a conversation turn."""

    IDLE = "idle"
    THINKING = "thinking"
    STREAMING = "streaming"
    ERROR = "error"


class Attachment(BaseModel):
    """An image staged for the next outgoing user message.

    Attributes:
        base64: Pure base64 payload, without any data-URI prefix.
        mime_type: Declared media type of the original file.
    """

    model_config = ConfigDict(frozen=True)

    base64: str = Field(..., min_length=1)
    mime_type: str = Field(..., min_length=1)


class WebSource(BaseModel):
    """Web page the agent grounded its answer on."""

    model_config = ConfigDict(frozen=True)

    uri: str
    title: str | None = None


class GroundingChunk(BaseModel):
    """A citation reference as reported by the provider ({web: {uri, title}})."""

    model_config = ConfigDict(frozen=True)

    web: WebSource | None = None

    @property
    def uri(self) -> str | None:
        return self.web.uri if self.web else None


class Message(BaseModel):
    """A single message in the conversation transcript.

    Messages are frozen. The in-progress assistant message of a turn is
    replaced wholesale by a copy carrying the same id on every snapshot.

    Attributes:
        id: Opaque unique token.
        role: The speaker (user, assistant, or system).
        content: Message text, possibly markdown.
        timestamp: Creation time (UTC).
        attachment: Image sent with a user message.
        grounding_chunks: Citations collected for an assistant message.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    role: MessageRole
    content: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)
    attachment: Attachment | None = None
    grounding_chunks: list[GroundingChunk] | None = None


class AgentResponse(BaseModel):
    """Cumulative snapshot of a streamed agent answer.

    Attributes:
        text: All text received so far in this turn.
        grounding_chunks: Citations deduplicated by URI, None until one arrives.
    """

    text: str = ""
    grounding_chunks: list[GroundingChunk] | None = None


class ChatRequest(BaseModel):
    """Request payload for the streaming chat endpoint.

    Attributes:
        message: User's question or prompt. May be empty with an attachment.
        session_id: Session the turn belongs to.
        attachment: Optional image previously staged through /upload/image.
    """

    message: str = ""
    session_id: str = Field(..., min_length=1)
    attachment: Attachment | None = None

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v

    @model_validator(mode="after")
    def require_text_or_attachment(self) -> "ChatRequest":
        if not self.message and self.attachment is None:
            raise ValueError("A message or an attachment is required")
        return self


class StreamChunk(BaseModel):
    """A chunk of streamed response data.

    Attributes:
        content: Cumulative text of the assistant answer so far.
        done: Whether this is the final chunk.
        status: Turn status after this update.
        message: The message this update concerns (user, assistant or system).
        error: User-visible error notice if the turn failed.
    """

    content: str
    done: bool
    status: TurnStatus | None = None
    message: Message | None = None
    error: str | None = None


class SessionInfo(BaseModel):
    """A chat session and its stored history."""

    session_id: str
    messages: list[Message] = Field(default_factory=list)


class AttachmentUploadResponse(BaseModel):
    """Response after an image has been validated and encoded.

    Attributes:
        filename: Name of the uploaded file.
        size: Size of the file in bytes.
        attachment: Encoded attachment to send with the next chat request.
    """

    filename: str
    size: int = Field(ge=0)
    attachment: Attachment
