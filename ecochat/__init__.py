"""EcoChat - recycling assistant with persisted chat sessions.

Combines FastAPI for the session store API, NiceGUI for the chat interface,
httpx for the client-side gateway and Pydantic for data validation.

Components:
    - chat: session state manager, message log and keyword responder
    - persistence: gateway contract plus in-memory, SQLite and HTTP stores
    - api: REST endpoints over a persistence gateway
    - ui: Web interface for chat interactions
    - models: Message, session and request schemas
"""

__version__ = "0.1.0"
