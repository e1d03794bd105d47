"""In-memory storage for conversation history.

Sessions live for the lifetime of the process: there is no eviction,
persistence or locking. Each session is written by a single turn at a time.
"""

import logging

from research_chat.models.schemas import Message, new_id

logger = logging.getLogger(__name__)


class SessionStore:
    """Ordered message history per session identifier."""

    def __init__(self) -> None:
        self._sessions: dict[str, list[Message]] = {}

    def create_session(self) -> str:
        """Register a fresh session with an empty history.

        Returns:
            The new session identifier.
        """
        session_id = new_id()
        self._sessions[session_id] = []
        logger.debug(f"Created session {session_id}")
        return session_id

    def get_history(self, session_id: str) -> list[Message]:
        """Return the messages of a session in insertion order.

        Unknown sessions are treated as empty.
        """
        return list(self._sessions.get(session_id, []))

    def add_message(self, session_id: str, message: Message) -> None:
        """Append a message, creating the session if it is unknown."""
        self._sessions.setdefault(session_id, []).append(message)

    def clear_session(self, session_id: str) -> None:
        """Remove a session and all of its messages."""
        if self._sessions.pop(session_id, None) is not None:
            logger.debug(f"Cleared session {session_id}")

    def has_session(self, session_id: str) -> bool:
        return session_id in self._sessions

    def session_ids(self) -> list[str]:
        return list(self._sessions)
