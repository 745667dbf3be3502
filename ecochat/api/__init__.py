"""FastAPI endpoints for the EcoChat session store.

RESTful API with async request handling over a persistence gateway.

Endpoints:
    - GET /health: Service health status
    - POST /sessions, GET /sessions: Create and list an owner's sessions
    - DELETE /sessions/{id}: Delete a session with its messages
    - POST /sessions/{id}/messages, GET /sessions/{id}/messages: Message history
"""

from ecochat.api.app import app, create_app

__all__ = ["app", "create_app"]
