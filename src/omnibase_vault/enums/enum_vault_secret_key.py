# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Well-known secret keys stored in every tenant bundle."""

from enum import Enum


class EnumVaultSecretKey(str, Enum):
    """Secret keys with a fixed meaning across tenants."""

    DATABASE_HOST = "DATABASE_HOST"
    DATABASE_NAME = "DATABASE_NAME"
    DATABASE_PASS = "DATABASE_PASS"
    DATABASE_USER = "DATABASE_USER"


__all__ = ["EnumVaultSecretKey"]
