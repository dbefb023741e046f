"""
Log sanitization utilities to prevent log injection attacks.
"""

import re
from typing import Any
from urllib.parse import urlsplit, urlunsplit


def sanitize_for_log(value: Any, max_length: int = 100) -> str:
    """
    Sanitize a value for safe logging.

    Removes control characters, newlines, and other potentially dangerous characters
    that could be used for log injection attacks.

    Args:
        value: The value to sanitize
        max_length: Maximum length of the output (default 100)

    Returns:
        Sanitized string safe for logging
    """
    str_value = str(value)

    # Remove control characters, newlines, carriage returns
    sanitized = re.sub(r"[\x00-\x1f\x7f-\x9f\r\n\t]", "", str_value)

    # Limit length to prevent log flooding
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."

    return sanitized


def sanitize_url(url: str, max_length: int = 200) -> str:
    """
    Sanitize a URL taken from a request body for logging.

    Drops credentials and the query string, which may carry tokens.

    Args:
        url: The URL to sanitize
        max_length: Maximum length of the output

    Returns:
        Sanitized URL
    """
    try:
        parts = urlsplit(str(url))
    except ValueError:
        return sanitize_for_log(url, max_length)

    netloc = parts.netloc.rsplit("@", 1)[-1]
    cleaned = urlunsplit((parts.scheme, netloc, parts.path, "", ""))
    return sanitize_for_log(cleaned, max_length)
