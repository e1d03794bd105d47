"""Unit tests for the in-memory session store."""

import pytest_check as check

from research_chat.models.schemas import Message, MessageRole
from research_chat.sessions.store import SessionStore


def _message(content: str, role: MessageRole = MessageRole.USER) -> Message:
    return Message(role=role, content=content)


class TestCreateSession:
    """Tests for session creation."""

    def test_new_session_is_empty(self, session_store: SessionStore) -> None:
        """A created session is registered with no messages."""
        session_id = session_store.create_session()

        check.is_true(session_store.has_session(session_id))
        check.equal(session_store.get_history(session_id), [])

    def test_session_ids_are_unique(self, session_store: SessionStore) -> None:
        """Every created session gets a distinct identifier."""
        ids = {session_store.create_session() for _ in range(50)}

        assert len(ids) == 50


class TestHistory:
    """Tests for appending and reading messages."""

    def test_history_preserves_call_order(self, session_store: SessionStore) -> None:
        """get_history returns messages in exact add_message order."""
        session_id = session_store.create_session()
        messages = [
            _message("first"),
            _message("second", MessageRole.ASSISTANT),
            _message("third", MessageRole.SYSTEM),
            _message("first"),
        ]

        for message in messages:
            session_store.add_message(session_id, message)

        assert session_store.get_history(session_id) == messages

    def test_duplicate_messages_are_kept(self, session_store: SessionStore) -> None:
        """The store performs no deduplication."""
        session_id = session_store.create_session()
        message = _message("again")

        session_store.add_message(session_id, message)
        session_store.add_message(session_id, message)

        assert len(session_store.get_history(session_id)) == 2

    def test_unknown_session_is_empty(self, session_store: SessionStore) -> None:
        """Unknown session ids read as an empty history, not an error."""
        assert session_store.get_history("does-not-exist") == []

    def test_add_to_unknown_session_creates_it(self, session_store: SessionStore) -> None:
        """Appending to an unknown id creates it with that single message."""
        message = _message("hello")

        session_store.add_message("implicit", message)

        check.is_true(session_store.has_session("implicit"))
        check.equal(session_store.get_history("implicit"), [message])

    def test_returned_history_is_a_copy(self, session_store: SessionStore) -> None:
        """Mutating the returned list does not change the stored history."""
        session_id = session_store.create_session()
        session_store.add_message(session_id, _message("kept"))

        session_store.get_history(session_id).clear()

        assert len(session_store.get_history(session_id)) == 1

    def test_sessions_are_independent(self, session_store: SessionStore) -> None:
        """Messages added to one session do not appear in another."""
        first = session_store.create_session()
        second = session_store.create_session()

        session_store.add_message(first, _message("only in first"))

        check.equal(len(session_store.get_history(first)), 1)
        check.equal(session_store.get_history(second), [])


class TestClearSession:
    """Tests for session removal."""

    def test_clear_then_history_is_empty(self, session_store: SessionStore) -> None:
        """clear_session followed by get_history yields an empty list."""
        session_id = session_store.create_session()
        for i in range(5):
            session_store.add_message(session_id, _message(f"msg {i}"))

        session_store.clear_session(session_id)

        check.equal(session_store.get_history(session_id), [])
        check.is_false(session_store.has_session(session_id))
        check.is_not_in(session_id, session_store.session_ids())

    def test_clear_unknown_session_is_noop(self, session_store: SessionStore) -> None:
        """Clearing an unknown session does not raise."""
        session_store.clear_session("missing")

        assert session_store.session_ids() == []
