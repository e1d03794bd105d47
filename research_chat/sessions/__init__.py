"""Conversation history storage.

Holds the ordered transcript of every session in memory. Pure mapping,
no business logic: citation deduplication happens in the agent layer.
"""

from research_chat.sessions.store import SessionStore

__all__ = ["SessionStore"]
