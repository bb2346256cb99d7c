"""
Input sanitization for user-supplied text.

Chat messages and board fields are rendered by browsers, so markup is escaped
rather than stripped: a user typing "<b>" sees "<b>" again, not bold text.
"""

import re
from typing import Any

import bleach

USERNAME_PATTERN = re.compile(r"[a-zA-Z0-9_-]+")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
DEFAULT_MAX_LENGTH = 500


def sanitize_input(value: Any, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Trim, truncate and HTML-escape a user-supplied string.

    Args:
        value: Raw value from the client; anything other than a string yields ""
        max_length: Maximum length kept, applied before escaping

    Returns:
        The sanitized string, possibly empty
    """
    if not value or not isinstance(value, str):
        return ""
    trimmed = value.strip()[:max_length]
    return bleach.clean(trimmed, tags=frozenset(), attributes={}, strip=False)


def validate_username(username: Any) -> bool:
    """Return True if username is 3-20 characters of letters, digits, '_' or '-'."""
    if not username or not isinstance(username, str):
        return False
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return False
    return bool(USERNAME_PATTERN.fullmatch(username))
