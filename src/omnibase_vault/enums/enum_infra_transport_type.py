# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure Transport Type Enumeration.

Defines the canonical transport types used in error context and tracing.
"""

from enum import Enum


class EnumInfraTransportType(str, Enum):
    """Transport types for omnibase_vault components.

    Attributes:
        VAULT: HashiCorp Vault secret transport
        MOCK: In-memory or file-backed stand-in for Vault
        RUNTIME: Runtime internal transport (cache, config loading)
    """

    VAULT = "vault"
    MOCK = "mock"
    RUNTIME = "runtime"


__all__ = ["EnumInfraTransportType"]
