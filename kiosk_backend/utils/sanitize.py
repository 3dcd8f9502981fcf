"""
Input sanitization utilities
"""
import re
from typing import Any

DEFAULT_MAX_LENGTH = 256

_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize(value: Any, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Normalize an arbitrary value into a bounded single-line string

    Args:
        value: Any input value (None yields an empty string)
        max_length: Maximum allowed length

    Returns:
        Whitespace-collapsed, trimmed text of at most max_length characters
    """
    if value is None:
        return ""

    try:
        text = value if isinstance(value, str) else str(value)
    except Exception:
        return ""

    # Remove null bytes
    text = text.replace("\x00", "")
    text = _WHITESPACE_RUN.sub(" ", text).strip()

    # Truncate to max length
    if max_length < 0:
        max_length = 0
    return text[:max_length].rstrip()
