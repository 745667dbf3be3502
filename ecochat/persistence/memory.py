"""Process-local persistence gateway.

Keeps sessions and messages in dictionaries. Used for tests and for running
the UI without a store service.
"""

import logging
import uuid

from ecochat.errors import SessionNotFound
from ecochat.models.schemas import MessageRole, SessionRecord, StoredMessage, utc_now
from ecochat.persistence.gateway import require_owner, require_storable_role

logger = logging.getLogger(__name__)


class InMemoryGateway:
    """Dictionary-backed implementation of ``PersistenceGateway``."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionRecord] = {}
        self._messages: dict[str, list[StoredMessage]] = {}
        self._next_seq = 0
        # Write counter per session; breaks ties between equal timestamps.
        self._touched: dict[str, int] = {}

    async def create_session(self, owner_id: str | None, title: str) -> SessionRecord:
        owner = require_owner(owner_id)
        now = utc_now()
        record = SessionRecord(
            id=str(uuid.uuid4()),
            owner_id=owner,
            title=title,
            created_at=now,
            updated_at=now,
        )
        self._sessions[record.id] = record
        self._messages[record.id] = []
        self._touch(record.id)
        logger.info(f"Created session {record.id} for {owner}")
        return record

    async def list_sessions(self, owner_id: str | None) -> list[SessionRecord]:
        owner = require_owner(owner_id)
        owned = [s for s in self._sessions.values() if s.owner_id == owner]
        return sorted(owned, key=lambda s: (s.updated_at, self._touched[s.id]), reverse=True)

    async def delete_session(self, session_id: str) -> None:
        if session_id not in self._sessions:
            raise SessionNotFound(session_id)
        del self._sessions[session_id]
        del self._messages[session_id]
        del self._touched[session_id]
        logger.info(f"Deleted session {session_id}")

    async def append_message(
        self, session_id: str, content: str, role: MessageRole
    ) -> StoredMessage:
        require_storable_role(role)
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        now = utc_now()
        message = StoredMessage(
            id=str(uuid.uuid4()),
            session_id=session_id,
            role=role,
            content=content,
            created_at=now,
            seq=self._next_seq,
        )
        self._next_seq += 1
        self._messages[session_id].append(message)
        self._sessions[session_id] = session.model_copy(update={"updated_at": now})
        self._touch(session_id)
        return message

    def _touch(self, session_id: str) -> None:
        self._touched[session_id] = self._next_seq
        self._next_seq += 1

    async def list_messages(self, session_id: str) -> list[StoredMessage]:
        if session_id not in self._sessions:
            raise SessionNotFound(session_id)
        return list(self._messages[session_id])
