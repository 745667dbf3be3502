"""Pydantic models for chat sessions, messages and API payloads.

In-memory messages (``ChatMessage``) carry a client-side id that is only used
as a rendering key. Stored messages (``StoredMessage``) carry the id and
ordering key assigned by the store. The two are never compared.
"""

import itertools
import time
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

_message_counter = itertools.count(1)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def new_local_id() -> str:
    """Generate a process-unique message id.

    Combines a monotonic counter with the wall clock in milliseconds so ids
    stay unique even when several messages are created in the same tick.
    """
    return f"msg-{next(_message_counter)}-{int(time.time() * 1000)}"


class MessageRole(str, Enum):
    """Speaker of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    WELCOME = "welcome"


class DeliveryStatus(str, Enum):
    """Durable state of an in-memory message."""

    LOCAL = "local"
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"


class ChatMessage(BaseModel):
    """A message as rendered in the message log.

    Attributes:
        id: Local rendering key, unique within the process.
        content: The message text.
        role: Who produced the message.
        timestamp: Client-side creation time.
        status: Whether the message reached the store.
    """

    id: str = Field(default_factory=new_local_id)
    content: str
    role: MessageRole
    timestamp: datetime = Field(default_factory=utc_now)
    status: DeliveryStatus = DeliveryStatus.PENDING


class SessionRecord(BaseModel):
    """A durable chat session as returned by the store.

    Attributes:
        id: Store-assigned session identifier.
        owner_id: Identity of the user owning the session.
        title: Title derived from the first user message.
        created_at: Creation timestamp.
        updated_at: Timestamp of the last appended message.
    """

    id: str
    owner_id: str
    title: str
    created_at: datetime
    updated_at: datetime


class StoredMessage(BaseModel):
    """A message as persisted by the store.

    Attributes:
        id: Store-assigned message identifier.
        session_id: Owning session.
        role: ``user`` or ``assistant``.
        content: The message text.
        created_at: Store-side creation timestamp.
        seq: Ordering key, strictly increasing within a session.
    """

    id: str
    session_id: str
    role: MessageRole
    content: str
    created_at: datetime
    seq: int = Field(ge=0)


class CreateSessionRequest(BaseModel):
    """Request payload for session creation."""

    title: str = Field(..., min_length=1, max_length=200)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: str) -> str:
        """Strip whitespace from the title before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class AppendMessageRequest(BaseModel):
    """Request payload for appending a message to a session.

    Attributes:
        content: Message text, non-empty after stripping.
        role: ``user`` or ``assistant``; welcome messages are never stored.
    """

    content: str = Field(..., min_length=1)
    role: MessageRole

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v: str) -> str:
        """Strip whitespace from content before validation."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("role")
    @classmethod
    def reject_welcome(cls, v: MessageRole) -> MessageRole:
        """Only conversational roles can be persisted."""
        if v is MessageRole.WELCOME:
            raise ValueError("welcome messages cannot be persisted")
        return v
