# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definitions for omnibase_vault."""

from omnibase_vault.protocols.protocol_secret_repository import (
    ProtocolSecretRepository,
)

__all__: list[str] = ["ProtocolSecretRepository"]
