"""Persistence gateway contract consumed by the chat engine."""

from typing import Protocol, runtime_checkable

from ecochat.errors import AuthRequired
from ecochat.models.schemas import MessageRole, SessionRecord, StoredMessage


@runtime_checkable
class PersistenceGateway(Protocol):
    """Durable store for chat sessions and their messages.

    Every method may suspend for an unbounded time. Failures raise
    ``StoreError`` (or ``SessionNotFound``); missing identity raises
    ``AuthRequired``.
    """

    async def create_session(self, owner_id: str | None, title: str) -> SessionRecord:
        """Create a session and return it with its durable id."""
        ...

    async def list_sessions(self, owner_id: str | None) -> list[SessionRecord]:
        """List the owner's sessions, most recently updated first."""
        ...

    async def delete_session(self, session_id: str) -> None:
        """Delete a session and all of its messages."""
        ...

    async def append_message(
        self, session_id: str, content: str, role: MessageRole
    ) -> StoredMessage:
        """Append a user or assistant message to an existing session."""
        ...

    async def list_messages(self, session_id: str) -> list[StoredMessage]:
        """List a session's messages, oldest first."""
        ...


def require_owner(owner_id: str | None) -> str:
    """Return the stripped owner id or raise ``AuthRequired``."""
    if owner_id is None or not owner_id.strip():
        raise AuthRequired("An owner identity is required for this operation")
    return owner_id.strip()


def require_storable_role(role: MessageRole) -> MessageRole:
    """Reject roles that are never persisted."""
    if role not in (MessageRole.USER, MessageRole.ASSISTANT):
        raise ValueError(f"Role {role.value!r} cannot be persisted")
    return role
