"""Backing data for the session history sidebar."""

import logging
from collections.abc import Callable
from datetime import datetime

from ecochat.errors import ChatError
from ecochat.models.schemas import SessionRecord
from ecochat.persistence.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class SessionList:
    """Durable sessions of one owner, most recently updated first.

    Fetches the full list on ``refresh``. Between refreshes the chat engine
    reports created, updated and deleted sessions so the list stays current without
    refetching.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        owner_id: str | None,
        on_change: Callable[[], None] | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        self._gateway = gateway
        self._owner_id = owner_id
        self._on_change = on_change
        self._on_error = on_error
        self._sessions: list[SessionRecord] = []
        self.loading = True

    @property
    def sessions(self) -> tuple[SessionRecord, ...]:
        return tuple(self._sessions)

    def get(self, session_id: str) -> SessionRecord | None:
        return next((s for s in self._sessions if s.id == session_id), None)

    async def refresh(self) -> bool:
        """Reload the list from the store.

        On failure the previous entries are kept and the error is surfaced.

        Returns:
            True if the list was reloaded.
        """
        try:
            sessions = await self._gateway.list_sessions(self._owner_id)
        except ChatError as e:
            logger.error(f"Failed to load chat history: {e}")
            self.loading = False
            self._changed()
            if self._on_error:
                self._on_error("Failed to load chat history")
            return False
        self._sessions = list(sessions)
        self.loading = False
        self._changed()
        return True

    def session_created(self, record: SessionRecord) -> None:
        """Show a newly created session at the top of the list."""
        self._sessions = [record, *(s for s in self._sessions if s.id != record.id)]
        self._changed()

    def session_touched(self, session_id: str, updated_at: datetime) -> None:
        """Move a session that just received a message to the top of the list."""
        record = self.get(session_id)
        if record is None:
            return
        touched = record.model_copy(update={"updated_at": max(record.updated_at, updated_at)})
        self._sessions = [touched, *(s for s in self._sessions if s.id != session_id)]
        self._changed()

    def session_deleted(self, session_id: str) -> None:
        self._sessions = [s for s in self._sessions if s.id != session_id]
        self._changed()

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()
