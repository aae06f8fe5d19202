# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault Handler Configuration Model.

This module provides the Pydantic configuration models for the tenant secret
repository: AppRole credentials, Vault address and mount, the CA certificate
used as TLS trust root, renewal settings and the mock backend switch.

Security Note:
    role_id and secret_id use SecretStr to prevent accidental logging of
    credentials. They should come from environment variables, never from
    YAML files committed to a repository.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

from omnibase_vault.handlers.model_vault_retry_config import ModelVaultRetryConfig


class ModelVaultMockConfig(BaseModel):
    """Mock backend switch.

    Attributes:
        enabled: Serve secrets from ``json_file`` instead of a live Vault
        json_file: Path to a ``{tenant: {key: value}}`` JSON document
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = Field(default=False, description="Use the mock backend")
    json_file: Path | None = Field(
        default=None,
        description="JSON file with mock tenant bundles",
    )


class ModelVaultHandlerConfig(BaseModel):
    """Configuration for the Vault tenant secret repository.

    Attributes:
        role_id: AppRole role ID (required unless mock mode is enabled)
        secret_id: AppRole secret ID (required unless mock mode is enabled)
        url: Vault server URL (e.g. "https://vault.example.com:8200")
        mount_path: KV v2 mount holding one secret per tenant
        cert_path: PEM CA bundle used to verify the Vault server
        namespace: Vault namespace for Vault Enterprise (optional)
        timeout_seconds: HTTP timeout applied by the hvac transport
        renewal_increment_seconds: Increment requested on each token renewal
        min_lease_seconds: Renewed leases shorter than this end the watcher
        retry: Backoff for supervisor login retries
        mock: Mock backend switch

    Example:
        >>> config = ModelVaultHandlerConfig(
        ...     role_id=SecretStr("role"),
        ...     secret_id=SecretStr("secret"),
        ...     url="https://vault.example.com:8200",
        ...     mount_path="tenants",
        ...     cert_path=Path("/etc/vault/ca.pem"),
        ... )
        >>> print(config.secret_id)
        **********
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        from_attributes=True,
    )

    role_id: SecretStr | None = Field(
        default=None,
        description="AppRole role ID",
    )
    secret_id: SecretStr | None = Field(
        default=None,
        description="AppRole secret ID",
    )
    url: str | None = Field(
        default=None,
        description="Vault server URL (e.g., 'https://vault.example.com:8200')",
    )
    mount_path: str | None = Field(
        default=None,
        description="KV v2 mount path holding tenant secrets",
    )
    cert_path: Path | None = Field(
        default=None,
        description="PEM CA certificate used as TLS trust root",
    )
    namespace: str | None = Field(
        default=None,
        description="Vault namespace for Vault Enterprise",
    )
    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="HTTP timeout in seconds",
    )
    renewal_increment_seconds: int = Field(
        default=3600,
        ge=60,
        le=86400 * 31,
        description="Lease increment requested on each token renewal",
    )
    min_lease_seconds: int = Field(
        default=10,
        ge=1,
        le=3600,
        description="Renewed leases below this end the lifetime watcher",
    )
    retry: ModelVaultRetryConfig = Field(
        default_factory=ModelVaultRetryConfig,
        description="Login retry backoff for the renewal supervisor",
    )
    mock: ModelVaultMockConfig = Field(
        default_factory=ModelVaultMockConfig,
        description="Mock backend switch",
    )

    @model_validator(mode="after")
    def _check_required_fields(self) -> ModelVaultHandlerConfig:
        if self.mock.enabled:
            if self.mock.json_file is None or not str(self.mock.json_file):
                raise ValueError("mocked json file name not provided")
            return self

        missing = [
            name
            for name in ("role_id", "secret_id", "url", "mount_path", "cert_path")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                f"missing required vault settings: {', '.join(missing)}"
            )
        return self

    @property
    def normalized_mount_path(self) -> str:
        """Mount path without surrounding slashes."""
        return (self.mount_path or "").strip("/")


__all__: list[str] = ["ModelVaultHandlerConfig", "ModelVaultMockConfig"]
