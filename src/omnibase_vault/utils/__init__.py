# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Utility modules for omnibase_vault.

This package provides common utilities used across the package:
    - util_typed_cache: Thread-safe typed key/value cache
    - util_secret_bundle: Bundle shape validation, freezing and unflattening
    - util_error_sanitization: Error message sanitization for logs and spans
"""

from omnibase_vault.utils.util_error_sanitization import (
    SENSITIVE_PATTERNS,
    sanitize_error_message,
    sanitize_error_string,
)
from omnibase_vault.utils.util_secret_bundle import (
    DEFAULT_KEY_DELIMITER,
    BundleShapeError,
    freeze_bundle,
    unflatten_bundle,
    validate_secret_bundle,
)
from omnibase_vault.utils.util_typed_cache import TypedCache

__all__: list[str] = [
    "DEFAULT_KEY_DELIMITER",
    "SENSITIVE_PATTERNS",
    "BundleShapeError",
    "TypedCache",
    "freeze_bundle",
    "sanitize_error_message",
    "sanitize_error_string",
    "unflatten_bundle",
    "validate_secret_bundle",
]
