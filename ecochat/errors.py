"""Chat engine exceptions.

Distinguishes missing identity, store failures and invalid user input.
"""


class ChatError(Exception):
    """Base exception for chat operations."""

    pass


class AuthRequired(ChatError):
    """No owner identity is available for a session operation."""

    pass


class StoreError(ChatError):
    """A persistence gateway call failed (network, backend, storage)."""

    pass


class SessionNotFound(StoreError):
    """The requested session does not exist in the store."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class ChatValidationError(ChatError):
    """User input was rejected, e.g. blank message text."""

    pass
