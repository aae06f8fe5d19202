# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Type aliases for omnibase_vault."""

from omnibase_vault.types.type_secret_value import (
    SECRET_VALUE_TYPES,
    SecretBundle,
    SecretValue,
)

__all__: list[str] = [
    "SECRET_VALUE_TYPES",
    "SecretBundle",
    "SecretValue",
]
