# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret service wiring.

This module is the single place where a SecretService is assembled from a
ModelVaultHandlerConfig. Consumers receive the constructed service and pass
it on explicitly; there is no process-wide service instance.

Example Usage:
    ```python
    from omnibase_vault.runtime.config_loader import load_vault_config
    from omnibase_vault.runtime.wiring import create_secret_service

    config = load_vault_config("config.yaml")
    service = create_secret_service(config)
    db_host = service.get_secret_as_string("client1", "DATABASE_HOST")
    ```

Repository Selection:
    - ``config.mock.enabled``: MockVaultSecretRepository loaded from
      ``config.mock.json_file``
    - otherwise: VaultSecretRepository, initialized (first login done and
      renewal supervisor running) before the service is returned
"""

from __future__ import annotations

import logging

from omnibase_vault.handlers.handler_vault import VaultSecretRepository
from omnibase_vault.handlers.handler_vault_mock import MockVaultSecretRepository
from omnibase_vault.handlers.model_vault_handler_config import ModelVaultHandlerConfig
from omnibase_vault.observability import VaultTracer
from omnibase_vault.protocols import ProtocolSecretRepository
from omnibase_vault.runtime.secret_service import SecretService

logger = logging.getLogger(__name__)


def create_secret_repository(
    config: ModelVaultHandlerConfig,
    tracer: VaultTracer | None = None,
    start_renewal: bool = True,
) -> ProtocolSecretRepository:
    """Build the repository selected by ``config``.

    Raises:
        ProtocolConfigurationError: If the mock file or the Vault
            certificate cannot be loaded
        InfraAuthenticationError: If the first Vault login fails
    """
    if config.mock.enabled:
        logger.info(
            "Using mock secret repository",
            extra={"json_file": str(config.mock.json_file)},
        )
        return MockVaultSecretRepository.from_json_file(config.mock.json_file)

    repository = VaultSecretRepository(config, tracer=tracer)
    repository.initialize(start_renewal=start_renewal)
    return repository


def create_secret_service(
    config: ModelVaultHandlerConfig,
    tracer: VaultTracer | None = None,
    coalesce_fetches: bool = True,
    start_renewal: bool = True,
) -> SecretService:
    """Build a ready-to-use SecretService for ``config``.

    Args:
        config: Validated Vault configuration
        tracer: Span helper for the renewal supervisor
        coalesce_fetches: Deduplicate concurrent first fetches per tenant
        start_renewal: Start the Vault renewal supervisor (ignored in mock mode)

    Returns:
        SecretService over the selected repository
    """
    repository = create_secret_repository(
        config, tracer=tracer, start_renewal=start_renewal
    )
    return SecretService(repository, coalesce_fetches=coalesce_fetches)


__all__: list[str] = ["create_secret_repository", "create_secret_service"]
