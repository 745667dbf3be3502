"""Chat configuration with environment variable loading.

Pydantic-based settings shared by the engine, the UI and the store API.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class ChatConfig(BaseModel):
    """Configuration for the chat engine and its collaborators.

    Attributes:
        api_base_url: Root URL of the session store API.
        owner_id: Identity of the current user; None means anonymous.
        reply_delay: Simulated responder latency in seconds.
        title_max_length: Maximum length of derived session titles.
        database_path: SQLite file used by the store API.
        request_timeout: Timeout for store API calls in seconds.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("ECOCHAT_API_URL", "http://localhost:8000"),
        description="Session store API base URL",
    )
    owner_id: str | None = Field(
        default_factory=lambda: os.getenv("ECOCHAT_OWNER_ID") or None,
        description="Owner identity sent to the session store",
    )
    reply_delay: float = Field(
        default_factory=lambda: float(os.getenv("ECOCHAT_REPLY_DELAY", "1.5")),
        ge=0.0,
        le=30.0,
        description="Simulated reply latency in seconds",
    )
    title_max_length: int = Field(
        default_factory=lambda: int(os.getenv("ECOCHAT_TITLE_MAX_LENGTH", "50")),
        ge=10,
        le=200,
        description="Maximum session title length",
    )
    database_path: str = Field(
        default_factory=lambda: os.getenv("ECOCHAT_DB_PATH", "data/ecochat.db"),
        description="SQLite database file for the session store",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("ECOCHAT_REQUEST_TIMEOUT", "10")),
        gt=0.0,
        description="Session store request timeout in seconds",
    )

    @field_validator("owner_id")
    @classmethod
    def normalize_owner_id(cls, v: str | None) -> str | None:
        """Treat blank owner ids as missing."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


def get_chat_config() -> ChatConfig:
    """Create chat configuration from environment.

    Returns:
        Configured ChatConfig instance.

    Raises:
        ValueError: If an environment value is out of range.
    """
    return ChatConfig()
