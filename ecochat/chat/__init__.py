"""Chat session and message synchronization.

Responsibilities:
    - ChatEngine: active session, optimistic message log, store reconciliation
    - MessageLog: display order and the single-welcome rule
    - SessionList: sidebar data kept in step with created/deleted sessions
    - generate_reply: keyword responder for recycling questions

Contains no UI code. Talks to storage only through a PersistenceGateway.
"""

from ecochat.chat.engine import ChatEngine, SessionState
from ecochat.chat.message_log import MessageLog
from ecochat.chat.responder import WELCOME_TEXT, generate_reply
from ecochat.chat.session_list import SessionList
from ecochat.chat.titles import derive_title, display_title
from ecochat.errors import (
    AuthRequired,
    ChatError,
    ChatValidationError,
    SessionNotFound,
    StoreError,
)

__all__ = [
    "WELCOME_TEXT",
    "AuthRequired",
    "ChatEngine",
    "ChatError",
    "ChatValidationError",
    "MessageLog",
    "SessionList",
    "SessionNotFound",
    "SessionState",
    "StoreError",
    "derive_title",
    "display_title",
    "generate_reply",
]
