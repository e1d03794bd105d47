"""Turn orchestration between the transcript, the store and the agent."""

from research_chat.chat.controller import (
    ERROR_NOTICE,
    GREETING,
    ConversationController,
    TurnRejectedError,
    TurnUpdate,
)
from research_chat.chat.registry import ControllerRegistry

__all__ = [
    "ERROR_NOTICE",
    "GREETING",
    "ControllerRegistry",
    "ConversationController",
    "TurnRejectedError",
    "TurnUpdate",
]
