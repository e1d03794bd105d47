"""Conversation controller driving one chat session turn by turn.

The controller owns the displayed transcript and the turn status of the
active session. It writes user, assistant and system messages to the
session store and consumes the agent runner's snapshot stream, replacing
the in-progress assistant message in place on every snapshot.

Status transitions::

    idle -> thinking -> streaming -> idle
            thinking -> error            (failure before or during streaming)
    error -> thinking                    (next turn)
"""

import logging
from collections.abc import AsyncGenerator

from pydantic import BaseModel

from research_chat.agent.chat_agent import AgentRunner
from research_chat.models.schemas import Attachment, Message, MessageRole, TurnStatus
from research_chat.sessions.store import SessionStore

logger = logging.getLogger(__name__)

ERROR_NOTICE = "**[SYSTEM ERROR]** Failed to process the request or file."

GREETING = """\
### 🕷️ Research Validator Ready
**Modules:** Extraction + Reputation Guard + Vision
**Goal:** Search, validate and extract documents.

**Capabilities:**
*   **🛡️ Reputation Check:** I rate how trustworthy each source is (official vs scam).
*   **👁️ Document OCR:** Attach an image or scan (📎) to extract its text and tables.
*   **🔎 Targeted Search:** Ask for documents by type or site (`filetype:pdf`, `site:gov`).

*Type a query or attach a document...*"""

_BUSY_STATUSES = frozenset({TurnStatus.THINKING, TurnStatus.STREAMING})


class TurnRejectedError(ValueError):
    """Raised when a turn or reset is requested while busy, or a turn has no content."""

    pass


class TurnUpdate(BaseModel):
    """Progress of a turn, emitted after every transcript change.

    Attributes:
        status: Turn status after the change.
        message: The message that was added or replaced.
        done: Whether the turn has finished.
    """

    status: TurnStatus
    message: Message
    done: bool = False


class ConversationController:
    """Orchestrates turns between the transcript, the store and the agent.

    Args:
        store: Session store the transcript is persisted to.
        runner: Agent runner owning the conversation handles.
        greeting: Assistant message shown at the start of every session.
        session_id: Existing session to attach to. Its stored history
            becomes the displayed transcript.
    """

    def __init__(
        self,
        store: SessionStore,
        runner: AgentRunner,
        greeting: str = GREETING,
        session_id: str | None = None,
    ) -> None:
        self._store = store
        self._runner = runner
        self._greeting = greeting
        self.session_id = session_id
        self.messages: list[Message] = store.get_history(session_id) if session_id else []
        self.status = TurnStatus.IDLE

    @property
    def is_busy(self) -> bool:
        return self.status in _BUSY_STATUSES

    def start_session(self) -> str:
        """Create a fresh session holding only the greeting message.

        Raises:
            TurnRejectedError: If a turn of the current session is in progress.
        """
        if self.is_busy:
            raise TurnRejectedError("Cannot start a new session while a turn is in progress")

        session_id = self._store.create_session()
        greeting = Message(role=MessageRole.ASSISTANT, content=self._greeting)
        self._store.add_message(session_id, greeting)

        self.session_id = session_id
        self.messages = [greeting]
        self.status = TurnStatus.IDLE
        logger.info(f"Started session {session_id}")
        return session_id

    def reset(self) -> str:
        """Discard the active session and its handle, then start a new one.

        Raises:
            TurnRejectedError: If a turn is in progress. The session is left
                untouched so the running turn can finish.
        """
        if self.is_busy:
            logger.warning(f"Reset refused for session {self.session_id}: turn in progress")
            raise TurnRejectedError("Cannot reset while a turn is in progress")

        if self.session_id is not None:
            self._runner.reset_session(self.session_id)
            self._store.clear_session(self.session_id)
            logger.info(f"Reset session {self.session_id}")
        return self.start_session()

    def can_submit(self, text: str, attachment: Attachment | None = None) -> bool:
        """Whether a turn with this content would be accepted now."""
        if self.is_busy:
            return False
        return bool(text.strip()) or attachment is not None

    def _splice(self, message: Message) -> None:
        """Replace the transcript entry with the same id, or append."""
        for index, existing in enumerate(self.messages):
            if existing.id == message.id:
                self.messages[index] = message
                return
        self.messages.append(message)

    def _fail_turn(self, session_id: str, in_progress_id: str) -> Message:
        """Replace any partial answer with the error notice."""
        self.messages = [m for m in self.messages if m.id != in_progress_id]
        error_message = Message(role=MessageRole.SYSTEM, content=ERROR_NOTICE)
        self._store.add_message(session_id, error_message)
        self.messages.append(error_message)
        self.status = TurnStatus.ERROR
        return error_message

    async def stream_turn(
        self,
        text: str,
        attachment: Attachment | None = None,
    ) -> AsyncGenerator[TurnUpdate, None]:
        """Run one user turn, yielding an update after every transcript change.

        Args:
            text: The user's message.
            attachment: Optional staged image for this message.

        Yields:
            TurnUpdate for the user message, each assistant snapshot, and
            finally the committed assistant message or the error notice.

        Raises:
            TurnRejectedError: If there is no active session, the controller
                is mid-turn, or the turn has neither text nor attachment.
        """
        if self.session_id is None:
            raise TurnRejectedError("No active session")
        if self.is_busy:
            raise TurnRejectedError("A turn is already in progress")
        if not self.can_submit(text, attachment):
            raise TurnRejectedError("A message or an attachment is required")

        session_id = self.session_id
        text = text.strip()

        user_message = Message(role=MessageRole.USER, content=text, attachment=attachment)
        self._store.add_message(session_id, user_message)
        self.messages.append(user_message)
        self.status = TurnStatus.THINKING
        logger.info(f"Turn started for session {session_id}")

        assistant_message = Message(role=MessageRole.ASSISTANT)
        try:
            yield TurnUpdate(status=self.status, message=user_message)

            try:
                async for snapshot in self._runner.send_turn(session_id, text, attachment):
                    self.status = TurnStatus.STREAMING
                    assistant_message = assistant_message.model_copy(
                        update={
                            "content": snapshot.text,
                            "grounding_chunks": snapshot.grounding_chunks,
                        }
                    )
                    self._splice(assistant_message)
                    yield TurnUpdate(status=self.status, message=assistant_message)
            except Exception:
                logger.exception(f"Turn failed for session {session_id}")
                error_message = self._fail_turn(session_id, assistant_message.id)
                yield TurnUpdate(status=self.status, message=error_message, done=True)
                return

            self._store.add_message(session_id, assistant_message)
            self.status = TurnStatus.IDLE
            logger.info(
                f"Turn finished for session {session_id} "
                f"({len(assistant_message.content)} chars, "
                f"{len(assistant_message.grounding_chunks or [])} sources)"
            )
            yield TurnUpdate(status=self.status, message=assistant_message, done=True)
        finally:
            # Consumer went away mid-turn (e.g. client disconnect)
            if self.is_busy:
                logger.warning(f"Turn abandoned for session {session_id}")
                self._fail_turn(session_id, assistant_message.id)

    async def submit_turn(self, text: str, attachment: Attachment | None = None) -> Message:
        """Run a whole turn and return the final assistant or system message."""
        final: Message | None = None
        async for update in self.stream_turn(text, attachment):
            if update.done:
                final = update.message
        if final is None:
            raise RuntimeError(f"Turn for session {self.session_id} ended without a result")
        return final
