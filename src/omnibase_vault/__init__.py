# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""omnibase_vault - Tenant-scoped secret retrieval backed by HashiCorp Vault.

Key Components:
    - SecretService: Cache-or-fetch secret access per tenant
    - VaultSecretRepository: Vault KV v2 backend with AppRole login and
      self-healing token renewal
    - MockVaultSecretRepository: Deterministic in-memory backend
    - load_vault_config / create_secret_service: Configuration and wiring

Example:
    >>> from omnibase_vault import create_secret_service, load_vault_config
    >>> service = create_secret_service(load_vault_config("config.yaml"))
    >>> service.get_secrets("client1", ["DATABASE_HOST", "DATABASE_USER"])
"""

from omnibase_vault.handlers import (
    MockVaultSecretRepository,
    ModelVaultHandlerConfig,
    VaultSecretRepository,
)
from omnibase_vault.runtime import SecretService
from omnibase_vault.runtime.config_loader import load_vault_config
from omnibase_vault.runtime.wiring import create_secret_service

__all__: list[str] = [
    "MockVaultSecretRepository",
    "ModelVaultHandlerConfig",
    "SecretService",
    "VaultSecretRepository",
    "create_secret_service",
    "load_vault_config",
]
