"""Agno agent runner with per-session conversation handles.

Core module for the chatbot's intelligence and conversation handling.

Each chat session gets its own Agno ``Agent`` (the conversation handle)
bound to a Gemini model with Google Search grounding and a reasoning budget.
Handles are created lazily on the first turn, cached for the lifetime of the
session and discarded on reset. Turn history is kept by Agno in an in-memory
database keyed by session id, so discarding a handle also drops its
provider-side context.

The runner does not retry: any provider or transport error aborts the
snapshot stream with ``AgentStreamError``.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from typing import Any, NamedTuple

from agno.agent import Agent
from agno.db.in_memory import InMemoryDb
from agno.media import Image
from agno.models.google import Gemini

from research_chat.agent.config import AgentConfig, get_agent_config
from research_chat.agent.prompts import DEFAULT_ATTACHMENT_PROMPT, build_system_instruction
from research_chat.agent.streaming import StreamDelta, accumulate_snapshots
from research_chat.attachments.encoder import decode_attachment
from research_chat.models.schemas import AgentResponse, Attachment, GroundingChunk, WebSource

logger = logging.getLogger(__name__)

# Agno run event names
_CONTENT_EVENT = "RunContent"
_ERROR_EVENT = "RunError"

# Turns of history replayed to the model on every request
_HISTORY_RUNS = 20


class AgentStreamError(RuntimeError):
    """Raised when the provider fails while producing a response."""

    pass


class TurnInput(NamedTuple):
    """Payload sent to the agent for one user turn."""

    message: str
    images: list[Image] | None


def build_turn_input(text: str, attachment: Attachment | None = None) -> TurnInput:
    """Assemble the outgoing payload for a turn.

    With an attachment the payload is multimodal: the text (or a default
    analysis prompt when the text is empty) plus the inline image.
    Otherwise it is plain text.
    """
    if attachment is None:
        return TurnInput(message=text, images=None)

    image = Image(
        content=decode_attachment(attachment),
        mime_type=attachment.mime_type,
    )
    return TurnInput(message=text or DEFAULT_ATTACHMENT_PROMPT, images=[image])


def _citations_to_chunks(citations: Any) -> list[GroundingChunk]:
    """Convert Agno citations into provider-shaped grounding chunks."""
    urls = getattr(citations, "urls", None) or []
    return [
        GroundingChunk(web=WebSource(uri=citation.url, title=citation.title))
        for citation in urls
        if getattr(citation, "url", None)
    ]


async def _iter_deltas(events: AsyncIterator[Any]) -> AsyncGenerator[StreamDelta, None]:
    """Extract text and citations from Agno run events.

    Events other than content events are skipped. An error event aborts
    the stream.
    """
    async for event in events:
        name = getattr(event, "event", _CONTENT_EVENT)
        if name == _ERROR_EVENT:
            raise AgentStreamError(getattr(event, "content", None) or "Agent run failed")
        if name != _CONTENT_EVENT:
            continue

        content = getattr(event, "content", None)
        text = content if isinstance(content, str) else ""
        chunks = _citations_to_chunks(getattr(event, "citations", None))
        if text or chunks:
            yield StreamDelta(text=text, grounding_chunks=chunks)


class AgentRunner:
    """Owns the conversation handles of all sessions.

    Wraps Agno's Agent with:
    - One handle per session id, created lazily and reused
    - Gemini model with web search and a fixed reasoning budget
    - Cumulative snapshot streaming with citation deduplication
    - Explicit handle discard on session reset
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the runner.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._db = InMemoryDb()
        self._handles: dict[str, Agent] = {}

    def _create_model(self) -> Gemini:
        return Gemini(
            id=self._config.model_name,
            api_key=self._config.api_key,
            search=True,
            thinking_budget=self._config.thinking_budget,
        )

    def _create_handle(self, session_id: str) -> Agent:
        """Create the Agno agent for one session.

        Returns:
            Agent bound to the session with the research instruction.
        """
        return Agent(
            model=self._create_model(),
            db=self._db,
            session_id=session_id,
            description="A web research agent that validates its sources.",
            instructions=build_system_instruction(self._config.report_language),
            add_history_to_context=True,
            num_history_runs=_HISTORY_RUNS,
            markdown=True,
        )

    def has_handle(self, session_id: str) -> bool:
        return session_id in self._handles

    def get_or_create_handle(self, session_id: str) -> Agent:
        """Return the session's handle, creating it on first use."""
        handle = self._handles.get(session_id)
        if handle is None:
            handle = self._create_handle(session_id)
            self._handles[session_id] = handle
            logger.info(f"Created conversation handle for session {session_id}")
        return handle

    def reset_session(self, session_id: str) -> None:
        """Discard the session's handle and its provider-side history."""
        if self._handles.pop(session_id, None) is None:
            return
        self._db.delete_session(session_id=session_id)
        logger.info(f"Discarded conversation handle for session {session_id}")

    async def send_turn(
        self,
        session_id: str,
        text: str,
        attachment: Attachment | None = None,
    ) -> AsyncGenerator[AgentResponse, None]:
        """Send a user turn and stream cumulative response snapshots.

        Args:
            session_id: Session the turn belongs to.
            text: The user's message, may be empty with an attachment.
            attachment: Optional image sent inline with the text.

        Yields:
            AgentResponse snapshots carrying all text received so far.

        Raises:
            AgentStreamError: If the provider fails at any point.
        """
        handle = self.get_or_create_handle(session_id)
        turn = build_turn_input(text, attachment)
        logger.info(
            f"Sending turn for session {session_id} "
            f"({len(turn.message)} chars, {len(turn.images or [])} images)"
        )

        try:
            events = handle.arun(
                turn.message,
                images=turn.images,
                session_id=session_id,
                stream=True,
            )
            async for snapshot in accumulate_snapshots(_iter_deltas(events)):
                yield snapshot
        except AgentStreamError:
            logger.error(f"Agent stream failed for session {session_id}")
            raise
        except Exception as e:
            logger.exception(f"Agent execution failed for session {session_id}")
            raise AgentStreamError(f"Agent execution failed: {e}") from e


# Module-level singleton instance
_agent_runner: AgentRunner | None = None


def get_agent_runner() -> AgentRunner:
    """Get or create the application's agent runner.

    Returns:
        The AgentRunner instance.
    """
    global _agent_runner
    if _agent_runner is None:
        _agent_runner = AgentRunner()
    return _agent_runner
