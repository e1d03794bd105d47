"""Session endpoints: start, inspect and reset conversations."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from research_chat.api.dependencies import get_controller_registry, get_session_store
from research_chat.chat.controller import TurnRejectedError
from research_chat.chat.registry import ControllerRegistry
from research_chat.models.schemas import SessionInfo
from research_chat.sessions.store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

RegistryDep = Annotated[ControllerRegistry, Depends(get_controller_registry)]
StoreDep = Annotated[SessionStore, Depends(get_session_store)]


@router.post("", response_model=SessionInfo, status_code=status.HTTP_201_CREATED)
async def create_session(registry: RegistryDep) -> SessionInfo:
    """Start a new session containing the assistant greeting."""
    controller = registry.create()
    return SessionInfo(session_id=controller.session_id, messages=controller.messages)


@router.get("/{session_id}", response_model=SessionInfo)
async def get_session(session_id: str, store: StoreDep) -> SessionInfo:
    """Return the stored history of a session.

    Unknown sessions are reported with an empty history.
    """
    return SessionInfo(session_id=session_id, messages=store.get_history(session_id))


@router.delete("/{session_id}", response_model=SessionInfo)
async def reset_session(session_id: str, registry: RegistryDep) -> SessionInfo:
    """Discard a session and its conversation handle, then start a fresh one.

    Returns:
        SessionInfo of the replacement session, holding only the greeting.

    Raises:
        409: The session has a turn in progress.
    """
    try:
        controller = registry.reset(session_id)
    except TurnRejectedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    logger.info(f"Session {session_id} replaced by {controller.session_id}")
    return SessionInfo(session_id=controller.session_id, messages=controller.messages)
