"""Unit tests for individual components in isolation.

Coverage:
    - chat/: session state manager, message log, session list, responder
    - models/: Pydantic validation
    - config: environment loading and bounds

Store calls go to an in-memory gateway that records calls and can be told
to fail or to hold a call until released.
"""
