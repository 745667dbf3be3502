"""SQLite-backed persistence gateway.

Single-file store for the REST service. Blocking sqlite3 calls run in a worker
thread and are serialized with an asyncio lock, so one connection is enough.

Schema:
    chat_sessions(id, owner_id, title, created_at, updated_at)
    chat_messages(seq, id, session_id, role, content, created_at)

``seq`` is an AUTOINCREMENT key, which gives messages a store-assigned order
that never depends on client clocks.
"""

import asyncio
import logging
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path

from ecochat.errors import SessionNotFound, StoreError
from ecochat.models.schemas import MessageRole, SessionRecord, StoredMessage, utc_now
from ecochat.persistence.gateway import require_owner, require_storable_role

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS chat_sessions (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    title TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS chat_messages (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    session_id TEXT NOT NULL REFERENCES chat_sessions(id) ON DELETE CASCADE,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_chat_sessions_owner
    ON chat_sessions(owner_id, updated_at DESC);
CREATE INDEX IF NOT EXISTS idx_chat_messages_session
    ON chat_messages(session_id, seq);
"""


class SqliteGateway:
    """``PersistenceGateway`` over a local SQLite database file."""

    def __init__(self, db_path: str | Path) -> None:
        """Open (and if needed create) the database.

        Args:
            db_path: Database file path, or ``":memory:"``.
        """
        self._db_path = str(db_path)
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(_SCHEMA)
        self._lock = asyncio.Lock()
        logger.info(f"Opened chat store at {self._db_path}")

    def close(self) -> None:
        self._conn.close()

    async def _run(self, func, *args):
        async with self._lock:
            try:
                return await asyncio.to_thread(func, *args)
            except sqlite3.Error as e:
                logger.error(f"SQLite operation {func.__name__} failed: {e}")
                raise StoreError(f"Database error: {e}") from e

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
        await self._run(self._insert_session, record)
        logger.info(f"Created session {record.id} for {owner}")
        return record

    async def list_sessions(self, owner_id: str | None) -> list[SessionRecord]:
        owner = require_owner(owner_id)
        rows = await self._run(self._select_sessions, owner)
        return [_session_from_row(row) for row in rows]

    async def delete_session(self, session_id: str) -> None:
        deleted = await self._run(self._delete_session, session_id)
        if not deleted:
            raise SessionNotFound(session_id)
        logger.info(f"Deleted session {session_id}")

    async def append_message(
        self, session_id: str, content: str, role: MessageRole
    ) -> StoredMessage:
        require_storable_role(role)
        row = await self._run(self._insert_message, session_id, content, role.value)
        if row is None:
            raise SessionNotFound(session_id)
        return _message_from_row(row)

    async def list_messages(self, session_id: str) -> list[StoredMessage]:
        rows = await self._run(self._select_messages, session_id)
        if rows is None:
            raise SessionNotFound(session_id)
        return [_message_from_row(row) for row in rows]

    # Blocking helpers, executed in a worker thread.

    def _insert_session(self, record: SessionRecord) -> None:
        with self._conn:
            self._conn.execute(
                "INSERT INTO chat_sessions (id, owner_id, title, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    record.id,
                    record.owner_id,
                    record.title,
                    record.created_at.isoformat(),
                    record.updated_at.isoformat(),
                ),
            )

    def _select_sessions(self, owner_id: str) -> list[sqlite3.Row]:
        return self._conn.execute(
            "SELECT * FROM chat_sessions WHERE owner_id = ? "
            "ORDER BY updated_at DESC, rowid DESC",
            (owner_id,),
        ).fetchall()

    def _delete_session(self, session_id: str) -> bool:
        with self._conn:
            self._conn.execute("DELETE FROM chat_messages WHERE session_id = ?", (session_id,))
            cursor = self._conn.execute("DELETE FROM chat_sessions WHERE id = ?", (session_id,))
        return cursor.rowcount > 0

    def _insert_message(self, session_id: str, content: str, role: str) -> sqlite3.Row | None:
        now = utc_now().isoformat()
        with self._conn:
            cursor = self._conn.execute(
                "UPDATE chat_sessions SET updated_at = ? WHERE id = ?", (now, session_id)
            )
            if cursor.rowcount == 0:
                return None
            cursor = self._conn.execute(
                "INSERT INTO chat_messages (id, session_id, role, content, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (str(uuid.uuid4()), session_id, role, content, now),
            )
        return self._conn.execute(
            "SELECT * FROM chat_messages WHERE seq = ?", (cursor.lastrowid,)
        ).fetchone()

    def _select_messages(self, session_id: str) -> list[sqlite3.Row] | None:
        exists = self._conn.execute(
            "SELECT 1 FROM chat_sessions WHERE id = ?", (session_id,)
        ).fetchone()
        if exists is None:
            return None
        return self._conn.execute(
            "SELECT * FROM chat_messages WHERE session_id = ? ORDER BY seq ASC",
            (session_id,),
        ).fetchall()


def _session_from_row(row: sqlite3.Row) -> SessionRecord:
    return SessionRecord(
        id=row["id"],
        owner_id=row["owner_id"],
        title=row["title"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _message_from_row(row: sqlite3.Row) -> StoredMessage:
    return StoredMessage(
        id=row["id"],
        session_id=row["session_id"],
        role=MessageRole(row["role"]),
        content=row["content"],
        created_at=datetime.fromisoformat(row["created_at"]),
        seq=row["seq"],
    )
