# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
Secret value type aliases.

Secret values arrive from the backend as untyped JSON scalars. They are kept
as a closed union instead of ``object`` so typed accessors can fail with a
SecretTypeError rather than passing arbitrary payloads through.
"""

from __future__ import annotations

from collections.abc import Mapping

# Scalar secret value (string, boolean or number)
type SecretValue = str | bool | int | float

# All secrets of one tenant, keyed by secret key
type SecretBundle = Mapping[str, SecretValue]

# Runtime counterpart of SecretValue for isinstance checks
SECRET_VALUE_TYPES: tuple[type, ...] = (str, bool, int, float)

__all__ = [
    "SECRET_VALUE_TYPES",
    "SecretBundle",
    "SecretValue",
]
