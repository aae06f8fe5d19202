# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shared models for omnibase_vault."""

from omnibase_vault.models.model_db_instance_config import ModelDbInstanceConfig
from omnibase_vault.models.model_retry_state import ModelRetryState
from omnibase_vault.models.model_secret_cache_stats import ModelSecretCacheStats
from omnibase_vault.models.model_token_lifecycle_event import (
    ModelTokenLifecycleEvent,
)
from omnibase_vault.models.model_vault_auth_info import ModelVaultAuthInfo

__all__: list[str] = [
    "ModelDbInstanceConfig",
    "ModelRetryState",
    "ModelSecretCacheStats",
    "ModelTokenLifecycleEvent",
    "ModelVaultAuthInfo",
]
