"""Lookup of conversation controllers by session id."""

import logging

from research_chat.agent.chat_agent import AgentRunner
from research_chat.chat.controller import ConversationController
from research_chat.sessions.store import SessionStore

logger = logging.getLogger(__name__)


class ControllerRegistry:
    """Keeps one controller per live session.

    The store and the runner are shared by every controller, so a session
    started in the browser page can also be driven through the HTTP API.
    """

    def __init__(self, store: SessionStore, runner: AgentRunner) -> None:
        self.store = store
        self.runner = runner
        self._controllers: dict[str, ConversationController] = {}

    def create(self) -> ConversationController:
        """Start a new session with its greeting and register its controller."""
        controller = ConversationController(self.store, self.runner)
        session_id = controller.start_session()
        self._controllers[session_id] = controller
        return controller

    def get(self, session_id: str) -> ConversationController:
        """Return the session's controller, attaching one if needed.

        Unknown sessions get a controller with an empty transcript.
        """
        controller = self._controllers.get(session_id)
        if controller is None:
            controller = ConversationController(self.store, self.runner, session_id=session_id)
            self._controllers[session_id] = controller
        return controller

    def reset(self, session_id: str) -> ConversationController:
        """Reset a session and re-register its controller under the new id.

        Raises:
            TurnRejectedError: If the session has a turn in progress. The
                controller stays registered under its current id.
        """
        controller = self.get(session_id)
        new_session_id = controller.reset()
        del self._controllers[session_id]
        self._controllers[new_session_id] = controller
        return controller

