"""Unit tests for session title helpers."""

from ecochat.chat.titles import DEFAULT_TITLE, derive_title, display_title


class TestDeriveTitle:
    """Tests for deriving titles from the first message."""

    def test_short_text_is_kept(self) -> None:
        assert derive_title("What about plastic?") == "What about plastic?"

    def test_long_text_is_truncated(self) -> None:
        assert derive_title("a" * 80) == "a" * 50

    def test_custom_limit(self) -> None:
        assert derive_title("recycling centers nearby", max_length=9) == "recycling"

    def test_whitespace_is_collapsed(self) -> None:
        assert derive_title("  glass \n\n jars\t") == "glass jars"

    def test_cut_does_not_leave_trailing_space(self) -> None:
        assert derive_title("paper bags", max_length=6) == "paper"

    def test_blank_text_falls_back(self) -> None:
        assert derive_title(" \n ") == DEFAULT_TITLE


class TestDisplayTitle:
    """Tests for sidebar labels."""

    def test_short_title_unchanged(self) -> None:
        assert display_title("Glass") == "Glass"

    def test_long_title_gets_ellipsis(self) -> None:
        assert display_title("How do I recycle pizza boxes?") == "How do I recycle pizza bo..."
