# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault-Specific Infrastructure Error Class.

This module defines the InfraVaultError class for failures talking to
HashiCorp Vault. It extends InfraConnectionError.
"""

from omnibase_vault.errors.infra_errors import InfraConnectionError
from omnibase_vault.errors.model_infra_error_context import ModelInfraErrorContext


class InfraVaultError(InfraConnectionError):
    """Error communicating with Vault.

    Used for hvac transport failures while reading a tenant bundle or
    listing tenants. The context should use
    ``transport_type=EnumInfraTransportType.VAULT``.

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.VAULT,
        ...     operation="fetch_bundle",
        ...     target_name="vault_repository",
        ... )
        >>> raise InfraVaultError(
        ...     "Failed to read tenant bundle from Vault",
        ...     context=context,
        ...     secret_path="tenants/client1",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: ModelInfraErrorContext | None = None,
        secret_path: str | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize InfraVaultError with Vault-specific context.

        Args:
            message: Human-readable error message
            context: Bundled infrastructure context (should use VAULT transport_type)
            secret_path: Optional path to the secret that caused the error
            **extra_context: Additional context information
        """
        if secret_path is not None:
            extra_context["secret_path"] = secret_path

        super().__init__(
            message=message,
            context=context,
            **extra_context,
        )


__all__: list[str] = [
    "InfraVaultError",
]
