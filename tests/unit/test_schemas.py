"""Unit tests for request and message models."""

import pytest
from pydantic import ValidationError

from ecochat.models.schemas import (
    AppendMessageRequest,
    ChatMessage,
    CreateSessionRequest,
    DeliveryStatus,
    MessageRole,
)


class TestAppendMessageRequest:
    """Tests for message payload validation."""

    def test_strips_content(self) -> None:
        request = AppendMessageRequest(content="  glass  ", role="user")

        assert request.content == "glass"
        assert request.role is MessageRole.USER

    def test_rejects_blank_content(self) -> None:
        with pytest.raises(ValidationError):
            AppendMessageRequest(content="   ", role="user")

    def test_rejects_welcome_role(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AppendMessageRequest(content="hi", role="welcome")

        assert "welcome" in str(exc_info.value)

    def test_rejects_unknown_role(self) -> None:
        with pytest.raises(ValidationError):
            AppendMessageRequest(content="hi", role="system")


class TestCreateSessionRequest:
    def test_rejects_blank_title(self) -> None:
        with pytest.raises(ValidationError):
            CreateSessionRequest(title="  ")


class TestChatMessage:
    """Tests for in-memory messages."""

    def test_defaults(self) -> None:
        message = ChatMessage(content="hi", role=MessageRole.USER)

        assert message.status is DeliveryStatus.PENDING
        assert message.id.startswith("msg-")
        assert message.timestamp.tzinfo is not None

    def test_ids_are_unique_within_a_burst(self) -> None:
        ids = {ChatMessage(content="x", role=MessageRole.USER).id for _ in range(500)}

        assert len(ids) == 500
