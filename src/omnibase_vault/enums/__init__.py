# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Enumerations for omnibase_vault."""

from omnibase_vault.enums.enum_infra_error_code import EnumInfraErrorCode
from omnibase_vault.enums.enum_infra_transport_type import EnumInfraTransportType
from omnibase_vault.enums.enum_token_lifecycle_event import (
    EnumTokenLifecycleEventType,
    EnumTokenRenewalOutcome,
)
from omnibase_vault.enums.enum_vault_secret_key import EnumVaultSecretKey

__all__: list[str] = [
    "EnumInfraErrorCode",
    "EnumInfraTransportType",
    "EnumTokenLifecycleEventType",
    "EnumTokenRenewalOutcome",
    "EnumVaultSecretKey",
]
