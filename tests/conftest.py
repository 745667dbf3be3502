"""Pytest fixtures and shared test configuration.

Fixtures:
    - gateway: recording in-memory store that can fail or hold calls
    - events: recorder for engine change and error notifications
    - session_list / engine: chat engine wired to the recording store
    - api_gateway / async_client: REST API over an in-memory store
"""

import asyncio
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field

import pytest
from httpx import ASGITransport, AsyncClient

from ecochat.api.app import create_app
from ecochat.chat.engine import ChatEngine
from ecochat.chat.session_list import SessionList
from ecochat.errors import StoreError
from ecochat.models.schemas import MessageRole, SessionRecord, StoredMessage
from ecochat.persistence.memory import InMemoryGateway

OWNER_ID = "user-123"


class RecordingGateway(InMemoryGateway):
    """In-memory store that records every call.

    ``fail(op)`` makes an operation raise until ``recover(op)``;
    ``hold(op)`` blocks an operation until the returned event is set.
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple] = []
        self.failures: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}

    def fail(self, operation: str, error: Exception | None = None) -> None:
        self.failures[operation] = error or StoreError(f"{operation} failed")

    def recover(self, operation: str) -> None:
        self.failures.pop(operation, None)

    def hold(self, operation: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[operation] = gate
        return gate

    def calls_to(self, operation: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == operation]

    async def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        gate = self.gates.get(operation)
        if gate is not None:
            await gate.wait()
        if operation in self.failures:
            raise self.failures[operation]

    async def create_session(self, owner_id: str | None, title: str) -> SessionRecord:
        await self._record("create_session", owner_id, title)
        return await super().create_session(owner_id, title)

    async def list_sessions(self, owner_id: str | None) -> list[SessionRecord]:
        await self._record("list_sessions", owner_id)
        return await super().list_sessions(owner_id)

    async def delete_session(self, session_id: str) -> None:
        await self._record("delete_session", session_id)
        await super().delete_session(session_id)

    async def append_message(
        self, session_id: str, content: str, role: MessageRole
    ) -> StoredMessage:
        await self._record("append_message", session_id, content, role)
        return await super().append_message(session_id, content, role)

    async def list_messages(self, session_id: str) -> list[StoredMessage]:
        await self._record("list_messages", session_id)
        return await super().list_messages(session_id)


@dataclass
class EventRecorder:
    """Collects engine notifications."""

    changes: int = 0
    errors: list[str] = field(default_factory=list)
    typing_seen: list[bool] = field(default_factory=list)
    engine: ChatEngine | None = None

    def changed(self) -> None:
        self.changes += 1
        if self.engine is not None:
            self.typing_seen.append(self.engine.is_typing)

    def error(self, text: str) -> None:
        self.errors.append(text)


@pytest.fixture
def gateway() -> RecordingGateway:
    """Return a fresh recording store."""
    return RecordingGateway()


@pytest.fixture
def events() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def session_list(gateway: RecordingGateway, events: EventRecorder) -> SessionList:
    return SessionList(gateway, OWNER_ID, on_error=events.error)


@pytest.fixture
def engine(
    gateway: RecordingGateway, session_list: SessionList, events: EventRecorder
) -> ChatEngine:
    """Create an engine with no reply delay, wired to the recording store.

    Returns:
        ChatEngine starting on a fresh ephemeral session.
    """
    chat_engine = ChatEngine(
        gateway,
        OWNER_ID,
        reply_delay=0,
        session_list=session_list,
        on_change=events.changed,
        on_error=events.error,
    )
    events.engine = chat_engine
    return chat_engine


@pytest.fixture
def api_gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
async def async_client(api_gateway: InMemoryGateway) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing.

    Yields:
        AsyncClient bound to an app serving ``api_gateway``.
    """
    transport = ASGITransport(app=create_app(gateway=api_gateway))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
