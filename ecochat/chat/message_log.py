"""Ordered message log for the active session.

Durable messages come first, in store order. Messages created in this process
follow in local append order. The log only ever appends after a load; a reload
replaces it wholesale instead of merging.
"""

import logging
from collections.abc import Iterable

from ecochat.models.schemas import ChatMessage, DeliveryStatus, MessageRole, StoredMessage

logger = logging.getLogger(__name__)


class MessageLog:
    """Append-only list of rendered messages with a single-welcome rule."""

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []
        self._ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Snapshot of the rendered messages, in display order."""
        return tuple(self._messages)

    @property
    def has_welcome(self) -> bool:
        return any(m.role is MessageRole.WELCOME for m in self._messages)

    @property
    def conversation_count(self) -> int:
        """Number of user and assistant messages, durable or not."""
        return sum(1 for m in self._messages if m.role is not MessageRole.WELCOME)

    @property
    def durable_count(self) -> int:
        return sum(1 for m in self._messages if m.status is DeliveryStatus.SYNCED)

    def replace(self, stored: Iterable[StoredMessage]) -> None:
        """Replace the whole log with durable messages in store order.

        Args:
            stored: Messages returned by the store for one session.
        """
        ordered = sorted(stored, key=lambda m: m.seq)
        self._messages = [
            ChatMessage(
                content=m.content,
                role=m.role,
                timestamp=m.created_at,
                status=DeliveryStatus.SYNCED,
            )
            for m in ordered
            if m.role is not MessageRole.WELCOME
        ]
        self._ids = {m.id for m in self._messages}

    def append(self, message: ChatMessage) -> bool:
        """Append a message after everything already rendered.

        Returns:
            False when a message with the same local id is already present.
        """
        if message.id in self._ids:
            logger.warning(f"Ignoring duplicate message id {message.id}")
            return False
        if message.role is MessageRole.WELCOME and (
            self.has_welcome or self.conversation_count
        ):
            return False
        self._messages.append(message)
        self._ids.add(message.id)
        return True

    def seed_welcome(self, text: str) -> bool:
        """Add the welcome placeholder if the log holds no conversation yet."""
        return self.append(
            ChatMessage(content=text, role=MessageRole.WELCOME, status=DeliveryStatus.LOCAL)
        )

    def strip_welcome(self) -> bool:
        """Remove the welcome placeholder.

        Returns:
            True if a welcome message was removed.
        """
        kept = [m for m in self._messages if m.role is not MessageRole.WELCOME]
        if len(kept) == len(self._messages):
            return False
        self._ids = {m.id for m in kept}
        self._messages = kept
        return True

    def mark(self, message_id: str, status: DeliveryStatus) -> None:
        """Update the delivery status of a message in place."""
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                self._messages[index] = message.model_copy(update={"status": status})
                return

    def get(self, message_id: str) -> ChatMessage | None:
        return next((m for m in self._messages if m.id == message_id), None)
