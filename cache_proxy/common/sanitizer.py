"""
Data Sanitization Module

Masks credentials in header mappings so forwarding logs never contain
plain text keys.
"""

from collections.abc import Mapping
from typing import Any

# Header names carrying credentials (lowercase)
SENSITIVE_HEADERS = frozenset({"authorization", "x-api-key", "x-goog-api-key", "api-key"})


def mask_secret(value: str) -> str:
    """
    Mask a credential value

    Keeps the scheme prefix and a few characters for identification.

    Examples:
        >>> mask_secret("Bearer sk-1234567890abcdef")
        'Bearer sk-1***...***ef'
        >>> mask_secret("short")
        '***'
    """
    if not value:
        return value

    prefix = ""
    token = value
    if value.lower().startswith("bearer "):
        prefix = "Bearer "
        token = value[7:]

    if len(token) <= 8:
        return f"{prefix}***"

    return f"{prefix}{token[:4]}***...***{token[-2:]}"


def sanitize_headers(headers: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Sanitize headers for logging

    Returns a new dictionary; the input mapping is not modified.
    """
    if not headers:
        return {}

    sanitized = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS and isinstance(value, str):
            sanitized[key] = mask_secret(value)
        else:
            sanitized[key] = value
    return sanitized
