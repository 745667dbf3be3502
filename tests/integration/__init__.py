"""Integration tests for components working together as a system.

No mocks for core functionality - tests real interactions.

Coverage:
    - Session store API endpoints with real HTTP requests (ASGI transport)
    - HttpGateway against the API, including error mapping
    - SqliteGateway against a temporary database file
    - ChatEngine driving the full stack over HTTP
"""
