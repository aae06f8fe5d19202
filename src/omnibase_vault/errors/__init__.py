# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""omnibase_vault Errors Module.

Exports:
    ModelInfraErrorContext: Configuration model for bundled error context
    RuntimeHostError: Base infrastructure error class
    ProtocolConfigurationError: Configuration errors (fatal at construction)
    SecretResolutionError: Tenant bundle / listing resolution errors
    SecretTypeError: Typed accessor mismatches
    SecretBindingError: Model binding validation errors
    InfraConnectionError: Backend transport errors
    InfraVaultError: Vault-specific transport errors
    InfraAuthenticationError: AppRole login and token errors

Error Sanitization Guidelines:
    NEVER include in error messages or context:
        - Secret values, role IDs, secret IDs or client tokens
        - Certificate contents

    SAFE to include:
        - Tenant identifiers and secret key names
        - Operation names and correlation IDs
        - Mount paths and sanitized backend warnings
"""

from omnibase_vault.errors.error_vault import InfraVaultError
from omnibase_vault.errors.infra_errors import (
    InfraAuthenticationError,
    InfraConnectionError,
    ProtocolConfigurationError,
    RuntimeHostError,
    SecretBindingError,
    SecretResolutionError,
    SecretTypeError,
)
from omnibase_vault.errors.model_infra_error_context import ModelInfraErrorContext

__all__: list[str] = [
    "ModelInfraErrorContext",
    "RuntimeHostError",
    "ProtocolConfigurationError",
    "SecretResolutionError",
    "SecretTypeError",
    "SecretBindingError",
    "InfraConnectionError",
    "InfraVaultError",
    "InfraAuthenticationError",
]
