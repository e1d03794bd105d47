"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - session_store: Empty in-memory session store
    - fake_runner: Scripted stand-in for the agent runner
    - controller: Conversation controller with a started session
    - registry: Controller registry over the store and fake runner
    - async_client: HTTPX client for API testing with the fakes wired in
    - png_bytes: Small PNG image payload
"""

from collections.abc import AsyncGenerator, AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from research_chat.agent.chat_agent import AgentStreamError
from research_chat.agent.streaming import StreamDelta, accumulate_snapshots
from research_chat.api import app
from research_chat.api.dependencies import get_controller_registry, get_session_store
from research_chat.chat.controller import ConversationController
from research_chat.chat.registry import ControllerRegistry
from research_chat.models.schemas import AgentResponse, Attachment
from research_chat.sessions.store import SessionStore

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


async def _iterate(deltas: list[StreamDelta]) -> AsyncIterator[StreamDelta]:
    for delta in deltas:
        yield delta


class FakeRunner:
    """Agent runner replacement producing scripted snapshots.

    Attributes:
        deltas: Deltas streamed on every turn.
        error: Raised before the first snapshot when set.
        fail_after: Raise AgentStreamError after this many snapshots.
    """

    def __init__(self) -> None:
        self.deltas: list[StreamDelta] = [
            StreamDelta(text="Hel"),
            StreamDelta(text="lo "),
            StreamDelta(text="World"),
        ]
        self.error: Exception | None = None
        self.fail_after: int | None = None
        self.calls: list[tuple[str, str, Attachment | None]] = []
        self.resets: list[str] = []

    async def send_turn(
        self,
        session_id: str,
        text: str,
        attachment: Attachment | None = None,
    ) -> AsyncGenerator[AgentResponse, None]:
        self.calls.append((session_id, text, attachment))
        if self.error is not None:
            raise self.error

        produced = 0
        async for snapshot in accumulate_snapshots(_iterate(self.deltas)):
            if self.fail_after is not None and produced == self.fail_after:
                raise AgentStreamError("connection reset")
            produced += 1
            yield snapshot

    def reset_session(self, session_id: str) -> None:
        self.resets.append(session_id)


@pytest.fixture
def session_store() -> SessionStore:
    """Return an empty session store."""
    return SessionStore()


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Return a runner streaming "Hel", "lo ", "World"."""
    return FakeRunner()


@pytest.fixture
def controller(session_store: SessionStore, fake_runner: FakeRunner) -> ConversationController:
    """Return a controller with a freshly started session."""
    ctrl = ConversationController(session_store, fake_runner)
    ctrl.start_session()
    return ctrl


@pytest.fixture
def registry(session_store: SessionStore, fake_runner: FakeRunner) -> ControllerRegistry:
    """Return a controller registry over the test store and fake runner."""
    return ControllerRegistry(session_store, fake_runner)


@pytest.fixture
def png_bytes() -> bytes:
    """Return a 1x1 PNG image."""
    return PNG_BYTES


@pytest.fixture
async def async_client(
    session_store: SessionStore,
    registry: ControllerRegistry,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing.

    The application's store and registry are replaced by the test fixtures,
    so no API key is needed.

    Yields:
        Configured AsyncClient for making test requests.
    """
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_controller_registry] = lambda: registry
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
