"""Pydantic models for the transcript, agent snapshots and API payloads.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Message: One transcript entry (user, assistant, or system)
    - Attachment: Base64 image staged for a user message
    - GroundingChunk: Web citation reported by the agent
    - AgentResponse: Cumulative snapshot of a streamed answer
    - ChatRequest / StreamChunk: Streaming chat endpoint payloads
    - SessionInfo: Chat session details
"""

from research_chat.models.schemas import (
    AgentResponse,
    Attachment,
    AttachmentUploadResponse,
    ChatRequest,
    GroundingChunk,
    Message,
    MessageRole,
    SessionInfo,
    StreamChunk,
    TurnStatus,
    WebSource,
    new_id,
)

__all__ = [
    "AgentResponse",
    "Attachment",
    "AttachmentUploadResponse",
    "ChatRequest",
    "GroundingChunk",
    "Message",
    "MessageRole",
    "SessionInfo",
    "StreamChunk",
    "TurnStatus",
    "WebSource",
    "new_id",
]
