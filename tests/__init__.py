"""Test package for EcoChat.

Unit tests cover the chat engine, message log, responder and models in
isolation; integration tests drive the REST API, the HTTP gateway and the
SQLite store end to end.

Structure:
    - unit/: Individual function and class tests
    - integration/: API and store workflow tests

Leverages pytest with pytest-asyncio and pytest-check for soft assertions.
"""
