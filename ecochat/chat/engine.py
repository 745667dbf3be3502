"""Session state manager for the chat UI.

Owns the active session, its message log and the typing flag, and mediates
every store call made on behalf of the UI.

Threading model: everything runs on one asyncio event loop. State only changes
between awaits, and the only awaits are store calls and the simulated reply
delay. After each of those the engine checks whether the session it was
working for is still the active one; if not, the result never touches the
displayed log.

Session lifecycle:
    EPHEMERAL_EMPTY -> EPHEMERAL_WITH_WELCOME -> EPHEMERAL_PENDING_CREATE
    -> DURABLE_ACTIVE -> DELETED | SUPERSEDED

Sends within one session are queued: each send's store calls start only after
the previous send of that session finished. That keeps store order equal to
send order and makes the first send the only one that creates the session.
If that create fails, the sends queued behind it fail with it; a send made
afterwards tries to create the session again.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

from ecochat.chat.message_log import MessageLog
from ecochat.chat.responder import WELCOME_TEXT, ResponseEngine, generate_reply
from ecochat.chat.session_list import SessionList
from ecochat.chat.titles import TITLE_MAX_LENGTH, derive_title
from ecochat.errors import AuthRequired, ChatError, ChatValidationError, SessionNotFound
from ecochat.models.schemas import ChatMessage, DeliveryStatus, MessageRole, StoredMessage
from ecochat.persistence.gateway import PersistenceGateway

logger = logging.getLogger(__name__)

DEFAULT_REPLY_DELAY = 1.5


class SessionState(str, Enum):
    """Lifecycle of a session from the engine's point of view."""

    EPHEMERAL_EMPTY = "ephemeral_empty"
    EPHEMERAL_WITH_WELCOME = "ephemeral_with_welcome"
    EPHEMERAL_PENDING_CREATE = "ephemeral_pending_create"
    DURABLE_ACTIVE = "durable_active"
    DELETED = "deleted"
    SUPERSEDED = "superseded"


TERMINAL_STATES = frozenset({SessionState.DELETED, SessionState.SUPERSEDED})


class _Session:
    """One conversation: identity, log and in-flight work."""

    def __init__(self, session_id: str | None = None, title: str | None = None) -> None:
        self.id = session_id
        self.title = title
        self.state = (
            SessionState.EPHEMERAL_EMPTY if session_id is None else SessionState.DURABLE_ACTIVE
        )
        self.log = MessageLog()
        self.loading = False
        self.load_failed = False
        self.pending_replies = 0
        # Last queued load or send; the next send waits for it.
        self.tail: asyncio.Task | None = None

    def end(self, state: SessionState) -> None:
        if self.state not in TERMINAL_STATES:
            self.state = state


class ChatEngine:
    """Single owner of the chat UI state.

    The UI reads state through properties and changes it only through
    ``start_new_session``, ``send_message``, ``select_session`` and
    ``delete_session``. ``on_change`` is called after every visible change;
    ``on_error`` receives one user-facing message per failed action.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        owner_id: str | None,
        *,
        responder: ResponseEngine = generate_reply,
        reply_delay: float = DEFAULT_REPLY_DELAY,
        title_max_length: int = TITLE_MAX_LENGTH,
        session_list: SessionList | None = None,
        on_change: Callable[[], None] | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the engine with a fresh ephemeral session.

        Args:
            gateway: Durable store for sessions and messages.
            owner_id: Identity used when creating and listing sessions.
            responder: Maps the latest user text to a reply.
            reply_delay: Simulated reply latency in seconds.
            title_max_length: Maximum length of derived session titles.
            session_list: Sidebar data to notify about created, updated and
                deleted sessions.
            on_change: Called after every observable state change.
            on_error: Called with a user-facing message when an action fails.
        """
        self._gateway = gateway
        self._owner_id = owner_id
        self._responder = responder
        self._reply_delay = reply_delay
        self._title_max_length = title_max_length
        self._session_list = session_list
        self._on_change = on_change
        self._on_error = on_error
        self._tasks: set[asyncio.Task[None]] = set()
        self._active = self._new_ephemeral()

    # -- read-only state ---------------------------------------------------

    @property
    def session_id(self) -> str | None:
        """Durable id of the active session, None while ephemeral."""
        return self._active.id

    @property
    def state(self) -> SessionState:
        return self._active.state

    @property
    def title(self) -> str | None:
        return self._active.title

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self._active.log.messages

    @property
    def is_typing(self) -> bool:
        return self._active.pending_replies > 0

    @property
    def is_loading(self) -> bool:
        return self._active.loading

    @property
    def is_ephemeral(self) -> bool:
        return self._active.id is None

    # -- intents -----------------------------------------------------------

    def start_new_session(self) -> None:
        """Discard the active session and show an empty one with a welcome."""
        self._active.end(SessionState.SUPERSEDED)
        self._active = self._new_ephemeral()
        logger.debug("Started new ephemeral session")
        self._changed()

    def send_message(self, text: str) -> asyncio.Task[None]:
        """Send a user message.

        The message is added to the log before this method returns. Creating
        the session, persisting the message and producing the reply happen in
        the returned task. Failures are reported through ``on_error``; the
        task itself does not raise for store failures.

        Args:
            text: The message text, must contain a non-whitespace character.

        Returns:
            Task completing when the whole exchange has been processed.

        Raises:
            ChatValidationError: If ``text`` is blank.
        """
        content = text.strip() if text else ""
        if not content:
            raise ChatValidationError("Message text must not be blank")

        session = self._active
        session.log.strip_welcome()
        message = ChatMessage(content=content, role=MessageRole.USER)
        session.log.append(message)
        if session.id is None and session.state not in TERMINAL_STATES:
            session.state = SessionState.EPHEMERAL_PENDING_CREATE

        task = asyncio.create_task(
            self._deliver(session, message, session.tail), name=f"send-{message.id}"
        )
        session.tail = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._changed()
        return task

    async def select_session(self, session_id: str) -> bool:
        """Make a durable session active and load its messages.

        Selecting the session that is already active does nothing, unless its
        last load failed: then the messages are fetched again.

        Returns:
            True if the session's messages are displayed.
        """
        active = self._active
        if session_id == active.id:
            if not active.load_failed:
                return True
            logger.info(f"Retrying load of session {session_id}")
            return await self._load(active)

        active.end(SessionState.SUPERSEDED)
        record = self._session_list.get(session_id) if self._session_list else None
        session = _Session(session_id, title=record.title if record else None)
        self._active = session
        return await self._load(session)

    async def delete_session(self, session_id: str) -> bool:
        """Delete a durable session.

        Deleting the active session starts a new ephemeral one. A session the
        store no longer knows is treated as already deleted.

        Returns:
            True if the session is gone from the store.
        """
        try:
            await self._gateway.delete_session(session_id)
        except SessionNotFound:
            logger.warning(f"Session {session_id} was already deleted")
        except ChatError as e:
            self._fail(f"Failed to delete session {session_id}", e, "Failed to delete chat")
            return False

        if self._session_list:
            self._session_list.session_deleted(session_id)
        if self._active.id == session_id:
            self._active.end(SessionState.DELETED)
            self.start_new_session()
        logger.info(f"Deleted session {session_id}")
        return True

    async def wait_idle(self) -> None:
        """Wait until every queued send has finished."""
        while self._tasks:
            await asyncio.wait(set(self._tasks))

    # -- load --------------------------------------------------------------

    async def _load(self, session: _Session) -> bool:
        session.loading = True
        session.load_failed = False
        load = asyncio.create_task(
            self._fetch_messages(session.id, session.tail), name=f"load-{session.id}"
        )
        session.tail = load
        self._changed()

        try:
            stored = await load
        except ChatError as e:
            session.loading = False
            session.load_failed = True
            self._fail(f"Failed to load messages for session {session.id}", e,
                       "Failed to load this chat")
            self._changed_if_active(session)
            return False

        if self._is_stale(session):
            logger.debug(f"Discarding messages of superseded session {session.id}")
            return False

        # Sends made before this load have finished; sends made during it are
        # queued behind it, so neither kind of unconfirmed message is in ``stored``.
        unconfirmed = [
            m
            for m in session.log.messages
            if m.role is not MessageRole.WELCOME and m.status is not DeliveryStatus.SYNCED
        ]
        session.log.replace(stored)
        for message in unconfirmed:
            session.log.append(message)
        session.log.seed_welcome(WELCOME_TEXT)
        session.loading = False
        logger.info(f"Loaded {len(stored)} messages for session {session.id}")
        self._changed()
        return True

    async def _fetch_messages(self, session_id: str, previous: asyncio.Task | None):
        if previous is not None:
            await asyncio.wait({previous})
        return await self._gateway.list_messages(session_id)

    # -- send pipeline -----------------------------------------------------

    async def _deliver(
        self,
        session: _Session,
        message: ChatMessage,
        previous: asyncio.Task | None,
    ) -> None:
        if previous is not None:
            await asyncio.wait({previous})

        current = session.log.get(message.id)
        if current is not None and current.status is DeliveryStatus.FAILED:
            logger.debug(f"Skipping message {message.id}, its session was never created")
            return

        if session.id is None and not await self._create(session, message):
            return

        try:
            stored = await self._gateway.append_message(
                session.id, message.content, MessageRole.USER
            )
        except ChatError as e:
            session.log.mark(message.id, DeliveryStatus.FAILED)
            self._fail(f"Failed to save message to session {session.id}", e,
                       "Your message could not be saved")
            self._changed_if_active(session)
            return
        session.log.mark(message.id, DeliveryStatus.SYNCED)
        self._touched(stored)

        if self._is_stale(session):
            logger.info(f"Session {session.id} was superseded, dropping reply")
            return
        self._changed()
        await self._reply(session, message.content)

    async def _create(self, session: _Session, message: ChatMessage) -> bool:
        title = derive_title(message.content, self._title_max_length)
        if session.state not in TERMINAL_STATES:
            session.state = SessionState.EPHEMERAL_PENDING_CREATE
        try:
            record = await self._gateway.create_session(self._owner_id, title)
        except ChatError as e:
            # Every send still waiting for this session fails with it.
            for queued in session.log.messages:
                if queued.role is MessageRole.USER and queued.status is DeliveryStatus.PENDING:
                    session.log.mark(queued.id, DeliveryStatus.FAILED)
            if session.state is SessionState.EPHEMERAL_PENDING_CREATE:
                session.state = SessionState.EPHEMERAL_EMPTY
            notice = (
                "Sign in to save your chats"
                if isinstance(e, AuthRequired)
                else "Could not start a new chat"
            )
            self._fail("Failed to create session", e, notice)
            self._changed_if_active(session)
            return False

        session.id = record.id
        session.title = record.title
        if session.state is SessionState.EPHEMERAL_PENDING_CREATE:
            session.state = SessionState.DURABLE_ACTIVE
        logger.info(f"Session {record.id} created with title {record.title!r}")
        if self._session_list:
            self._session_list.session_created(record)
        self._changed_if_active(session)
        return True

    async def _reply(self, session: _Session, text: str) -> None:
        session.pending_replies += 1
        self._changed()
        try:
            await asyncio.sleep(self._reply_delay)
            if self._is_stale(session):
                logger.info(f"Session {session.id} was superseded, dropping reply")
                return
            reply = ChatMessage(content=self._responder(text), role=MessageRole.ASSISTANT)
            session.log.append(reply)
        finally:
            session.pending_replies -= 1
        self._changed()

        try:
            stored = await self._gateway.append_message(
                session.id, reply.content, MessageRole.ASSISTANT
            )
        except ChatError as e:
            session.log.mark(reply.id, DeliveryStatus.FAILED)
            self._fail(f"Failed to save reply to session {session.id}", e,
                       "The reply could not be saved")
        else:
            session.log.mark(reply.id, DeliveryStatus.SYNCED)
            self._touched(stored)
        self._changed_if_active(session)

    # -- helpers -----------------------------------------------------------

    def _new_ephemeral(self) -> _Session:
        session = _Session()
        if session.log.seed_welcome(WELCOME_TEXT):
            session.state = SessionState.EPHEMERAL_WITH_WELCOME
        return session

    def _is_stale(self, session: _Session) -> bool:
        return session is not self._active

    def _fail(self, context: str, error: Exception, notice: str) -> None:
        logger.error(f"{context}: {error}")
        if self._on_error:
            self._on_error(notice)

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()

    def _changed_if_active(self, session: _Session) -> None:
        if not self._is_stale(session):
            self._changed()

    def _touched(self, stored: StoredMessage) -> None:
        if self._session_list:
            self._session_list.session_touched(stored.session_id, stored.created_at)
