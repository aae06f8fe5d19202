# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Infrastructure-Specific Error Classes.

Error Hierarchy:
    RuntimeHostError (base infrastructure error)
    ├── ProtocolConfigurationError
    ├── SecretResolutionError
    ├── SecretTypeError
    ├── SecretBindingError
    ├── InfraConnectionError
    │   └── InfraVaultError (error_vault.py)
    └── InfraAuthenticationError

All errors:
    - Use EnumInfraErrorCode for error classification
    - Support proper error chaining with `raise ... from e`
    - Include structured context for debugging
    - Support correlation IDs for request tracking
    - Accept ModelInfraErrorContext for bundled context parameters
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from omnibase_vault.enums import EnumInfraErrorCode
from omnibase_vault.errors.model_infra_error_context import ModelInfraErrorContext


class RuntimeHostError(Exception):
    """Base error class for omnibase_vault infrastructure errors.

    Structured Fields (via ModelInfraErrorContext):
        transport_type: Type of transport (vault, mock, runtime)
        operation: Operation being performed
        correlation_id: Request correlation ID for tracking
        target_name: Target resource/component name

    Example:
        >>> context = ModelInfraErrorContext(
        ...     transport_type=EnumInfraTransportType.VAULT,
        ...     operation="fetch_bundle",
        ...     target_name="vault_repository",
        ... )
        >>> raise RuntimeHostError("Operation failed", context=context, tenant="client1")
    """

    def __init__(
        self,
        message: str,
        error_code: EnumInfraErrorCode | None = None,
        context: ModelInfraErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize RuntimeHostError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to OPERATION_FAILED)
            context: Bundled infrastructure context (transport_type, operation, etc.)
            **extra_context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or EnumInfraErrorCode.OPERATION_FAILED

        structured_context: dict[str, object] = dict(extra_context)
        self.correlation_id: UUID | None = None
        if context is not None:
            if context.transport_type is not None:
                structured_context["transport_type"] = context.transport_type
            if context.operation is not None:
                structured_context["operation"] = context.operation
            if context.target_name is not None:
                structured_context["target_name"] = context.target_name
            self.correlation_id = context.correlation_id
        self.context = structured_context

    def __str__(self) -> str:
        return self.message


class ProtocolConfigurationError(RuntimeHostError):
    """Raised when configuration is missing, unreadable or invalid.

    Used for unreadable CA certificates, malformed mock files, a missing
    mock filename and pydantic validation failures of the vault config.
    These are fatal at construction time.
    """

    def __init__(
        self,
        message: str,
        context: ModelInfraErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumInfraErrorCode.INVALID_CONFIGURATION,
            context=context,
            **extra_context,
        )


class SecretResolutionError(RuntimeHostError):
    """Raised when a tenant bundle or tenant listing cannot be resolved.

    Used for unknown tenants, malformed bundle shapes and empty listings.
    Backend warnings reported alongside an empty listing are kept on
    ``warnings``.

    Example:
        >>> raise SecretResolutionError(
        ...     "No secrets for tenant client3",
        ...     context=context,
        ...     tenant="client3",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: ModelInfraErrorContext | None = None,
        warnings: Sequence[str] | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumInfraErrorCode.RESOURCE_NOT_FOUND,
            context=context,
            **extra_context,
        )
        self.warnings: list[str] = list(warnings or [])


class SecretTypeError(RuntimeHostError):
    """Raised when a present secret value does not have the requested type.

    A missing key is never a SecretTypeError; typed accessors return the
    zero value for absent keys.
    """

    def __init__(
        self,
        message: str,
        context: ModelInfraErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumInfraErrorCode.TYPE_MISMATCH,
            context=context,
            **extra_context,
        )


class SecretBindingError(RuntimeHostError):
    """Raised when a bundle cannot be bound onto a typed model.

    The pydantic error list is kept on ``errors`` with input values removed
    so that secret material never travels with the exception.
    """

    def __init__(
        self,
        message: str,
        context: ModelInfraErrorContext | None = None,
        errors: Sequence[dict[str, object]] | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumInfraErrorCode.VALIDATION_ERROR,
            context=context,
            **extra_context,
        )
        self.errors: list[dict[str, object]] = list(errors or [])


class InfraConnectionError(RuntimeHostError):
    """Raised when the secret backend cannot be reached or answers badly.

    Example:
        >>> raise InfraConnectionError(
        ...     "Failed to connect to Vault",
        ...     context=context,
        ...     url="https://vault.example.com:8200",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: ModelInfraErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumInfraErrorCode.CONNECTION_ERROR,
            context=context,
            **extra_context,
        )


class InfraAuthenticationError(RuntimeHostError):
    """Raised when AppRole login or token handling fails.

    The renewal supervisor retries these indefinitely; they only reach
    callers from ``initialize()`` or a direct ``login()`` call.
    """

    def __init__(
        self,
        message: str,
        context: ModelInfraErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumInfraErrorCode.AUTHENTICATION_ERROR,
            context=context,
            **extra_context,
        )


__all__ = [
    "RuntimeHostError",
    "ProtocolConfigurationError",
    "SecretResolutionError",
    "SecretTypeError",
    "SecretBindingError",
    "InfraConnectionError",
    "InfraAuthenticationError",
]
