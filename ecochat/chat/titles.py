"""Session title helpers."""

DEFAULT_TITLE = "New Chat"
TITLE_MAX_LENGTH = 50
DISPLAY_MAX_LENGTH = 25


def derive_title(text: str, max_length: int = TITLE_MAX_LENGTH) -> str:
    """Derive a session title from the first user message.

    Whitespace runs collapse to single spaces and the result is cut to
    ``max_length`` characters. Oversized input is truncated, never rejected.

    Args:
        text: The first user message.
        max_length: Maximum title length in characters.

    Returns:
        The title, or ``DEFAULT_TITLE`` when nothing printable remains.
    """
    title = " ".join(text.split())[:max_length].rstrip()
    return title or DEFAULT_TITLE


def display_title(title: str, max_length: int = DISPLAY_MAX_LENGTH) -> str:
    """Shorten a title for the session list."""
    return f"{title[:max_length]}..." if len(title) > max_length else title
