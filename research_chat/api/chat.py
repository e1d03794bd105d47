"""Streaming chat endpoint using Server-Sent Events.

Every transcript change of a turn is sent as one ``data:`` frame holding a
StreamChunk. The final frame has ``done=true`` and status ``idle`` on
success or ``error`` when the agent failed.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from research_chat.api.dependencies import get_controller_registry
from research_chat.chat.controller import TurnRejectedError, TurnUpdate
from research_chat.chat.registry import ControllerRegistry
from research_chat.models.schemas import ChatRequest, MessageRole, StreamChunk, TurnStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def _format_sse(chunk: StreamChunk) -> str:
    return f"data: {chunk.model_dump_json()}\n\n"


def _to_chunk(update: TurnUpdate) -> StreamChunk:
    """Convert a controller update into a wire chunk."""
    message = update.message
    if update.status == TurnStatus.ERROR:
        return StreamChunk(
            content="",
            done=update.done,
            status=update.status,
            message=message,
            error=message.content,
        )

    content = message.content if message.role == MessageRole.ASSISTANT else ""
    return StreamChunk(content=content, done=update.done, status=update.status, message=message)


@router.post("/stream")
async def chat_stream(
    request: ChatRequest,
    registry: Annotated[ControllerRegistry, Depends(get_controller_registry)],
) -> StreamingResponse:
    """Run one turn and stream its progress as SSE.

    Args:
        request: Message, session id and optional staged attachment.

    Returns:
        text/event-stream response of StreamChunk frames.

    Raises:
        409: The session already has a turn in progress.
    """
    controller = registry.get(request.session_id)
    if controller.is_busy:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A turn is already in progress for this session",
        )

    async def event_stream() -> AsyncGenerator[str, None]:
        try:
            async for update in controller.stream_turn(request.message, request.attachment):
                yield _format_sse(_to_chunk(update))
        except TurnRejectedError as e:
            logger.warning(f"Turn rejected for session {request.session_id}: {e}")
            yield _format_sse(
                StreamChunk(content="", done=True, status=controller.status, error=str(e))
            )

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
