# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for tenant secret repositories.

This module defines the ProtocolSecretRepository interface implemented by
backends that serve per-tenant secret bundles.

Architecture Context:
    - SecretService handles caching and typed access
    - ProtocolSecretRepository defines the backend contract
    - VaultSecretRepository (live Vault) and MockVaultSecretRepository
      (in-memory / JSON file) provide the bundles

    This separation enables:
    - Testing the service against a deterministic backend
    - Running without a live Vault when mock mode is configured

Error Contract:
    - ``fetch_bundle`` raises SecretResolutionError for unknown tenants and
      malformed payloads, InfraConnectionError for transport failures
    - ``list_tenants`` raises SecretResolutionError when the backend returns
      no data
    Implementations never retry; retries belong to the caller.

Example Usage:
    ```python
    class DictSecretRepository:
        def __init__(self, data: dict[str, dict[str, str]]) -> None:
            self._data = data

        def fetch_bundle(self, tenant: str) -> dict[str, str]:
            return dict(self._data[tenant])

        def list_tenants(self) -> list[str]:
            return list(self._data)

    # Protocol conformance check via duck typing
    repo = DictSecretRepository({})
    assert isinstance(repo, ProtocolSecretRepository)
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from omnibase_vault.types import SecretValue


@runtime_checkable
class ProtocolSecretRepository(Protocol):
    """Backend contract consumed by SecretService."""

    def fetch_bundle(self, tenant: str) -> Mapping[str, SecretValue]:
        """Return every secret stored for ``tenant``."""
        ...

    def list_tenants(self) -> list[str]:
        """Return every tenant known to the backend, order unspecified."""
        ...


__all__: list[str] = ["ProtocolSecretRepository"]
