"""
Tests for input sanitization and username validation.
"""

from datetime import UTC, datetime

import pytest

from chatboard.utils.sanitization import sanitize_input, validate_username
from chatboard.utils.time_utils import format_timestamp


class TestSanitizeInput:
    """sanitize_input()."""

    def test_plain_text_unchanged(self):
        """Test that ordinary text passes through."""
        assert sanitize_input("hello world") == "hello world"

    def test_trims_whitespace(self):
        """Test that surrounding whitespace is removed."""
        assert sanitize_input("   hi  \n") == "hi"

    def test_escapes_markup(self):
        """Test that tags are escaped rather than stripped."""
        assert sanitize_input("<script>alert(1)</script>") == "&lt;script&gt;alert(1)&lt;/script&gt;"

    def test_escapes_ampersand(self):
        """Test that a bare ampersand is escaped."""
        assert sanitize_input("a & b") == "a &amp; b"

    def test_truncates_before_escaping(self):
        """Test that the length limit applies to the raw text."""
        assert len(sanitize_input("x" * 600)) == 500
        assert sanitize_input("abcdef", max_length=3) == "abc"

    @pytest.mark.parametrize("value", [None, "", "   ", 42, ["x"], {"a": 1}])
    def test_non_text_or_blank_yields_empty(self, value):
        """Test that anything but non-blank text sanitizes to the empty string."""
        assert sanitize_input(value) == ""


class TestValidateUsername:
    """validate_username()."""

    @pytest.mark.parametrize("username", ["bob", "alice_99", "x-y-z", "a" * 20])
    def test_valid_usernames(self, username):
        """Test accepted usernames."""
        assert validate_username(username) is True

    @pytest.mark.parametrize("username", ["ab", "a" * 21, "bad name", "émile", "semi;colon", "", None, 123])
    def test_invalid_usernames(self, username):
        """Test rejected usernames."""
        assert validate_username(username) is False


class TestFormatTimestamp:
    """format_timestamp()."""

    def test_millisecond_precision_with_z(self):
        """Test the ISO 8601 rendering used on the wire."""
        assert format_timestamp(datetime(2024, 5, 1, 12, 30, 0, 123456)) == "2024-05-01T12:30:00.123Z"

    def test_aware_datetime_converted_to_utc(self):
        """Test that aware datetimes are normalised to UTC."""
        assert format_timestamp(datetime(2024, 5, 1, 12, 0, tzinfo=UTC)) == "2024-05-01T12:00:00.000Z"

    def test_none_passes_through(self):
        """Test that a missing timestamp stays None."""
        assert format_timestamp(None) is None
