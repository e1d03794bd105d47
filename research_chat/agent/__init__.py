"""Agno agent logic for the research assistant.

Responsibilities:
    - Per-session conversation handles on a Gemini model with web search
    - Multimodal turn payloads (text plus inline image)
    - Folding streamed deltas into cumulative snapshots with deduplicated citations

Maintains clean separation from the HTTP and UI layers.
"""

from research_chat.agent.chat_agent import (
    AgentRunner,
    AgentStreamError,
    build_turn_input,
    get_agent_runner,
)
from research_chat.agent.config import AgentConfig, get_agent_config
from research_chat.agent.streaming import StreamDelta, accumulate_snapshots

__all__ = [
    "AgentConfig",
    "AgentRunner",
    "AgentStreamError",
    "StreamDelta",
    "accumulate_snapshots",
    "build_turn_input",
    "get_agent_config",
    "get_agent_runner",
]
