# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret repository handlers for omnibase_vault.

Available Repositories:
- VaultSecretRepository: HashiCorp Vault KV v2 backend with AppRole login
  and background token renewal
- MockVaultSecretRepository: In-memory / JSON file backend

Configuration Models:
- ModelVaultHandlerConfig: Vault address, credentials, renewal and mock switch
- ModelVaultMockConfig: Mock backend switch
- ModelVaultRetryConfig: Login retry backoff
"""

from omnibase_vault.handlers.model_vault_retry_config import ModelVaultRetryConfig
from omnibase_vault.handlers.model_vault_handler_config import (
    ModelVaultHandlerConfig,
    ModelVaultMockConfig,
)
from omnibase_vault.handlers.handler_vault import VaultSecretRepository
from omnibase_vault.handlers.handler_vault_mock import MockVaultSecretRepository

__all__: list[str] = [
    "MockVaultSecretRepository",
    "ModelVaultHandlerConfig",
    "ModelVaultMockConfig",
    "ModelVaultRetryConfig",
    "VaultSecretRepository",
]
