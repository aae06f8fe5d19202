# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error message sanitization utilities.

This module provides functions to sanitize error messages before they are
logged, attached to trace spans or joined into backend warning errors.

Sanitization protects against leaking sensitive data such as:
- Client tokens, role IDs and secret IDs
- Secret values echoed back by the backend
- Certificate material

Example:
    >>> try:
    ...     raise ValueError("login failed for secret_id=abc123")
    ... except Exception as e:
    ...     safe_msg = sanitize_error_message(e)
    >>> "abc123" not in safe_msg
    True
"""

from __future__ import annotations

# Patterns that may indicate sensitive data in error messages.
# These patterns are checked case-insensitively against the error message.
SENSITIVE_PATTERNS: tuple[str, ...] = (
    # Credentials
    "password",
    "passwd",
    # Vault credentials
    "secret_id",
    "secret-id",
    "role_id",
    "role-id",
    "client_token",
    "x-vault-token",
    "hvs.",
    # Generic tokens
    "token=",
    "bearer",
    "authorization",
    # Certificate and key material
    "-----begin",
    "-----end",
)


def sanitize_error_string(error_str: str, max_length: int = 500) -> str:
    """Sanitize a raw error string for safe inclusion in logs and spans.

    Sanitization rules:
        1. If a sensitive pattern is present, return a generic redacted message
        2. Truncate long messages to prevent excessive data exposure

    Args:
        error_str: The error string to sanitize
        max_length: Maximum length of the sanitized message (default 500)

    Returns:
        Sanitized error message safe for storage and logging.
    """
    if not error_str:
        return ""

    error_lower = error_str.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in error_lower:
            return "[REDACTED - potentially sensitive data]"

    if len(error_str) > max_length:
        return error_str[:max_length] + "... [truncated]"

    return error_str


def sanitize_error_message(exception: BaseException, max_length: int = 500) -> str:
    """Sanitize an exception for safe inclusion in logs and spans.

    Returns:
        ``"{ExceptionType}: {sanitized_message}"``
    """
    exception_type = type(exception).__name__
    return f"{exception_type}: {sanitize_error_string(str(exception), max_length)}"


__all__: list[str] = [
    "SENSITIVE_PATTERNS",
    "sanitize_error_message",
    "sanitize_error_string",
]
