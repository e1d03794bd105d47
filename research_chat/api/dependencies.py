"""Application-wide services shared by the API routes and the UI page."""

from research_chat.agent.chat_agent import get_agent_runner
from research_chat.chat.registry import ControllerRegistry
from research_chat.sessions.store import SessionStore

# Module-level singleton instances
_session_store: SessionStore | None = None
_controller_registry: ControllerRegistry | None = None


def get_session_store() -> SessionStore:
    """Get or create the process-wide session store."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


def get_controller_registry() -> ControllerRegistry:
    """Get or create the controller registry.

    Creating it builds the agent runner, so the API key must be configured.

    Raises:
        ValueError: If no API key is set.
    """
    global _controller_registry
    if _controller_registry is None:
        _controller_registry = ControllerRegistry(get_session_store(), get_agent_runner())
    return _controller_registry
