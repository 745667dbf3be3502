"""Pydantic models for sessions, messages and API payloads.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatMessage: Message as shown in the message log
    - SessionRecord: Durable chat session
    - StoredMessage: Message as persisted by the store
    - CreateSessionRequest / AppendMessageRequest: API request payloads
"""

from ecochat.models.schemas import (
    AppendMessageRequest,
    ChatMessage,
    CreateSessionRequest,
    DeliveryStatus,
    MessageRole,
    SessionRecord,
    StoredMessage,
    new_local_id,
    utc_now,
)

__all__ = [
    "AppendMessageRequest",
    "ChatMessage",
    "CreateSessionRequest",
    "DeliveryStatus",
    "MessageRole",
    "SessionRecord",
    "StoredMessage",
    "new_local_id",
    "utc_now",
]
