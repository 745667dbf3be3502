"""Session store endpoints.

Thin HTTP layer over a ``PersistenceGateway``. Every route needs the
``X-Owner-Id`` header; gateway exceptions map to explicit status codes.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from ecochat.config import get_chat_config
from ecochat.errors import AuthRequired, SessionNotFound, StoreError
from ecochat.models.schemas import (
    AppendMessageRequest,
    CreateSessionRequest,
    SessionRecord,
    StoredMessage,
)
from ecochat.persistence.gateway import PersistenceGateway
from ecochat.persistence.sqlite import SqliteGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def get_gateway(request: Request) -> PersistenceGateway:
    """Return the application's store, opening the SQLite store on first use.

    Args:
        request: The incoming request.

    Returns:
        The gateway stored on ``app.state``.
    """
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        gateway = SqliteGateway(get_chat_config().database_path)
        request.app.state.gateway = gateway
    return gateway


def get_owner_id(x_owner_id: Annotated[str | None, Header()] = None) -> str:
    """Extract the owner identity from the ``X-Owner-Id`` header.

    Raises:
        HTTPException: 401 if the header is missing or blank.
    """
    if x_owner_id is None or not x_owner_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Owner-Id header is required",
        )
    return x_owner_id.strip()


Gateway = Annotated[PersistenceGateway, Depends(get_gateway)]
OwnerId = Annotated[str, Depends(get_owner_id)]


def _store_failure(action: str, error: Exception) -> HTTPException:
    """Translate a gateway exception into an HTTP error."""
    if isinstance(error, SessionNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, AuthRequired):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(error))
    logger.error(f"Failed to {action}: {error}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    )


@router.post("", response_model=SessionRecord, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: CreateSessionRequest, gateway: Gateway, owner_id: OwnerId
) -> SessionRecord:
    """Create a chat session for the calling owner.

    Raises:
        401: Missing owner header.
        422: Blank title.
        500: Store failure.
    """
    try:
        return await gateway.create_session(owner_id, payload.title)
    except (AuthRequired, StoreError) as e:
        raise _store_failure("create session", e) from e


@router.get("", response_model=list[SessionRecord])
async def list_sessions(gateway: Gateway, owner_id: OwnerId) -> list[SessionRecord]:
    """List the owner's sessions, most recently updated first."""
    try:
        return await gateway.list_sessions(owner_id)
    except (AuthRequired, StoreError) as e:
        raise _store_failure("list sessions", e) from e


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, gateway: Gateway, owner_id: OwnerId) -> None:
    """Delete a session and its messages.

    Raises:
        404: Unknown session.
    """
    try:
        await gateway.delete_session(session_id)
    except StoreError as e:
        raise _store_failure("delete session", e) from e
    logger.info(f"Owner {owner_id} deleted session {session_id}")


@router.post(
    "/{session_id}/messages",
    response_model=StoredMessage,
    status_code=status.HTTP_201_CREATED,
)
async def append_message(
    session_id: str,
    payload: AppendMessageRequest,
    gateway: Gateway,
    owner_id: OwnerId,
) -> StoredMessage:
    """Append a user or assistant message to a session.

    Raises:
        404: Unknown session.
        422: Blank content or a role that is never stored.
    """
    try:
        return await gateway.append_message(session_id, payload.content, payload.role)
    except StoreError as e:
        raise _store_failure("append message", e) from e


@router.get("/{session_id}/messages", response_model=list[StoredMessage])
async def list_messages(
    session_id: str, gateway: Gateway, owner_id: OwnerId
) -> list[StoredMessage]:
    """List a session's messages, oldest first."""
    try:
        return await gateway.list_messages(session_id)
    except StoreError as e:
        raise _store_failure("list messages", e) from e
