"""Integration tests for the session store API."""

from httpx import AsyncClient
from pytest_check import check

from ecochat.persistence.memory import InMemoryGateway

HEADERS = {"X-Owner-Id": "user-123"}


async def _create(client: AsyncClient, title: str, headers: dict[str, str] = HEADERS) -> dict:
    response = await client.post("/sessions", json={"title": title}, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestHealth:
    async def test_health_check(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "ecochat"}


class TestOwnerHeader:
    """Tests for the owner identity requirement."""

    async def test_create_without_owner_is_unauthorized(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/sessions", json={"title": "Glass"})

        assert response.status_code == 401
        assert "X-Owner-Id" in response.json()["detail"]

    async def test_blank_owner_is_unauthorized(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/sessions", headers={"X-Owner-Id": "  "})

        assert response.status_code == 401

    async def test_message_routes_require_owner(self, async_client: AsyncClient) -> None:
        session = await _create(async_client, "Paper")

        response = await async_client.get(f"/sessions/{session['id']}/messages")

        assert response.status_code == 401


class TestSessions:
    """Tests for session endpoints."""

    async def test_create_session(self, async_client: AsyncClient) -> None:
        session = await _create(async_client, "  How do I recycle glass?  ")

        with check:
            assert session["title"] == "How do I recycle glass?"
        with check:
            assert session["owner_id"] == "user-123"
        with check:
            assert session["id"]
        with check:
            assert session["created_at"] == session["updated_at"]

    async def test_create_rejects_blank_title(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/sessions", json={"title": " "}, headers=HEADERS)

        assert response.status_code == 422

    async def test_list_orders_by_last_update(self, async_client: AsyncClient) -> None:
        first = await _create(async_client, "first")
        second = await _create(async_client, "second")
        await async_client.post(
            f"/sessions/{first['id']}/messages",
            json={"content": "bump", "role": "user"},
            headers=HEADERS,
        )

        response = await async_client.get("/sessions", headers=HEADERS)

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [first["id"], second["id"]]

    async def test_list_is_scoped_to_owner(self, async_client: AsyncClient) -> None:
        await _create(async_client, "theirs", headers={"X-Owner-Id": "someone-else"})
        mine = await _create(async_client, "mine")

        response = await async_client.get("/sessions", headers=HEADERS)

        assert [s["id"] for s in response.json()] == [mine["id"]]

    async def test_delete_session(
        self, async_client: AsyncClient, api_gateway: InMemoryGateway
    ) -> None:
        session = await _create(async_client, "temporary")

        response = await async_client.delete(f"/sessions/{session['id']}", headers=HEADERS)
        assert response.status_code == 204

        again = await async_client.delete(f"/sessions/{session['id']}", headers=HEADERS)
        assert again.status_code == 404
        assert await api_gateway.list_sessions("user-123") == []


class TestMessages:
    """Tests for message endpoints."""

    async def test_append_and_list_in_order(self, async_client: AsyncClient) -> None:
        session = await _create(async_client, "batteries")
        url = f"/sessions/{session['id']}/messages"

        user = await async_client.post(
            url, json={"content": "Where do batteries go?", "role": "user"}, headers=HEADERS
        )
        reply = await async_client.post(
            url, json={"content": "Take them to a drop-off.", "role": "assistant"},
            headers=HEADERS,
        )
        assert user.status_code == 201
        assert reply.status_code == 201

        response = await async_client.get(url, headers=HEADERS)

        messages = response.json()
        assert [m["role"] for m in messages] == ["user", "assistant"]
        assert messages[0]["seq"] < messages[1]["seq"]
        assert messages[0]["session_id"] == session["id"]

    async def test_append_to_unknown_session(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/sessions/missing/messages",
            json={"content": "hello", "role": "user"},
            headers=HEADERS,
        )

        assert response.status_code == 404

    async def test_list_unknown_session(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/sessions/missing/messages", headers=HEADERS)

        assert response.status_code == 404

    async def test_rejects_welcome_role(self, async_client: AsyncClient) -> None:
        session = await _create(async_client, "welcome")

        response = await async_client.post(
            f"/sessions/{session['id']}/messages",
            json={"content": "Hi! I'm Sortify", "role": "welcome"},
            headers=HEADERS,
        )

        assert response.status_code == 422

    async def test_rejects_blank_content(self, async_client: AsyncClient) -> None:
        session = await _create(async_client, "blank")

        response = await async_client.post(
            f"/sessions/{session['id']}/messages",
            json={"content": "   ", "role": "user"},
            headers=HEADERS,
        )

        assert response.status_code == 422
