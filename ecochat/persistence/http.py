"""HTTP client for the session store API.

Implements ``PersistenceGateway`` over the REST endpoints in ``ecochat.api``.
The owner identity travels in the ``X-Owner-Id`` header.
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ecochat.errors import AuthRequired, SessionNotFound, StoreError
from ecochat.models.schemas import MessageRole, SessionRecord, StoredMessage
from ecochat.persistence.gateway import require_owner, require_storable_role

logger = logging.getLogger(__name__)

OWNER_HEADER = "X-Owner-Id"

ModelT = TypeVar("ModelT", bound=BaseModel)


class HttpGateway:
    """``PersistenceGateway`` backed by the EcoChat REST API.

    Session-scoped calls send the owner header when one is configured; the
    create and list calls refuse to go out without one.
    """

    def __init__(
        self,
        base_url: str,
        owner_id: str | None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: API root, e.g. ``http://localhost:8000``.
            owner_id: Identity sent with every request.
            timeout: Request timeout in seconds.
            client: Optional preconfigured client (tests pass an ASGI transport).
        """
        self._owner_id = owner_id
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self, owner_id: str | None = None) -> dict[str, str]:
        owner = owner_id if owner_id is not None else self._owner_id
        return {OWNER_HEADER: owner} if owner else {}

    async def _request(
        self,
        method: str,
        url: str,
        *,
        owner_id: str | None = None,
        session_id: str | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, url, json=json, headers=self._headers(owner_id)
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            logger.warning(f"{method} {url} failed with HTTP {code}")
            if code == 401:
                raise AuthRequired("The store rejected the request: no owner identity") from e
            if code == 404 and session_id is not None:
                raise SessionNotFound(session_id) from e
            raise StoreError(f"HTTP {code} from session store") from e
        except httpx.RequestError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise StoreError(f"Connection failed: {e}") from e
        return response

    def _decode(self, response: httpx.Response, model: type[ModelT]) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Unreadable {model.__name__} from {response.request.url}: {e}")
            raise StoreError(f"Malformed response from session store: {e}") from e

    def _decode_list(self, response: httpx.Response, model: type[ModelT]) -> list[ModelT]:
        try:
            return [model.model_validate(item) for item in response.json()]
        except (TypeError, ValueError, ValidationError) as e:
            logger.error(f"Unreadable {model.__name__} list from {response.request.url}: {e}")
            raise StoreError(f"Malformed response from session store: {e}") from e

    async def create_session(self, owner_id: str | None, title: str) -> SessionRecord:
        owner = require_owner(owner_id)
        response = await self._request(
            "POST", "/sessions", owner_id=owner, json={"title": title}
        )
        return self._decode(response, SessionRecord)

    async def list_sessions(self, owner_id: str | None) -> list[SessionRecord]:
        owner = require_owner(owner_id)
        response = await self._request("GET", "/sessions", owner_id=owner)
        return self._decode_list(response, SessionRecord)

    async def delete_session(self, session_id: str) -> None:
        await self._request("DELETE", f"/sessions/{session_id}", session_id=session_id)

    async def append_message(
        self, session_id: str, content: str, role: MessageRole
    ) -> StoredMessage:
        require_storable_role(role)
        response = await self._request(
            "POST",
            f"/sessions/{session_id}/messages",
            session_id=session_id,
            json={"content": content, "role": role.value},
        )
        return self._decode(response, StoredMessage)

    async def list_messages(self, session_id: str) -> list[StoredMessage]:
        response = await self._request(
            "GET", f"/sessions/{session_id}/messages", session_id=session_id
        )
        return self._decode_list(response, StoredMessage)
