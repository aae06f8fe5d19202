# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""HashiCorp Vault tenant secret repository using the hvac client.

Serves one KV v2 secret per tenant: the secret stored at
``{mount_path}/{tenant}`` is the tenant's whole bundle.

Security Features:
    - AppRole credentials and client tokens are SecretStr (never logged)
    - The CA certificate given in config is the TLS trust root
    - Error messages carry exception types and tenant names only
    - The token is owned by this repository and its renewal supervisor

Lifecycle:
    1. ``initialize()`` reads the CA certificate, builds the hvac client,
       performs the first AppRole login and starts the renewal supervisor.
       Any failure here is fatal and raised to the caller.
    2. ``fetch_bundle()`` and ``list_tenants()`` use the shared client; they
       never retry.
    3. ``shutdown()`` stops the supervisor and drops the client.

Error Mapping:
    - hvac.exceptions.InvalidPath -> SecretResolutionError
    - hvac.exceptions.Forbidden -> InfraAuthenticationError
    - any other transport failure -> InfraVaultError
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from uuid import UUID, uuid4

import hvac

from omnibase_vault.enums import EnumInfraTransportType
from omnibase_vault.errors import (
    InfraAuthenticationError,
    InfraVaultError,
    ModelInfraErrorContext,
    ProtocolConfigurationError,
    RuntimeHostError,
    SecretResolutionError,
)
from omnibase_vault.handlers.model_vault_handler_config import ModelVaultHandlerConfig
from omnibase_vault.models import ModelVaultAuthInfo
from omnibase_vault.observability import VaultTracer
from omnibase_vault.runtime.token_lifetime_watcher import TokenLifetimeWatcher
from omnibase_vault.runtime.token_renewal_supervisor import TokenRenewalSupervisor
from omnibase_vault.types import SecretValue
from omnibase_vault.utils import (
    BundleShapeError,
    sanitize_error_string,
    validate_secret_bundle,
)

logger = logging.getLogger(__name__)

TARGET_NAME: str = "vault_repository"


class VaultSecretRepository:
    """Tenant bundle repository backed by a live Vault server.

    Security Policy - Token Handling:
        The client token is issued by ``login()`` and kept inside the hvac
        client. Only the renewal supervisor replaces it. ``describe()``
        reports state without credentials.

    Example:
        >>> repository = VaultSecretRepository(config)
        >>> repository.initialize()
        >>> repository.fetch_bundle("client1")
        {'DATABASE_HOST': 'db.internal', ...}
        >>> repository.shutdown()
    """

    def __init__(
        self,
        config: ModelVaultHandlerConfig,
        tracer: VaultTracer | None = None,
    ) -> None:
        """Initialize the repository in uninitialized state.

        Args:
            config: Validated Vault configuration
            tracer: Span helper handed to the renewal supervisor
        """
        self._config = config
        self._tracer = tracer or VaultTracer()
        self._client: hvac.Client | None = None
        self._supervisor: TokenRenewalSupervisor | None = None
        self._initialized: bool = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def mount_path(self) -> str:
        return self._config.normalized_mount_path

    # -------------------------------------------------------------------------
    # Helper methods for initialize
    # -------------------------------------------------------------------------

    def _error_context(
        self, operation: str, correlation_id: UUID | None = None
    ) -> ModelInfraErrorContext:
        return ModelInfraErrorContext(
            transport_type=EnumInfraTransportType.VAULT,
            operation=operation,
            target_name=TARGET_NAME,
            correlation_id=correlation_id or uuid4(),
        )

    def _verify_certificate(self, correlation_id: UUID) -> str:
        """Check the CA certificate is readable and return its path."""
        cert_path = self._config.cert_path
        if cert_path is None:
            raise ProtocolConfigurationError(
                "Missing 'cert_path' in config - Vault CA certificate required",
                context=self._error_context("initialize", correlation_id),
            )
        try:
            pem_data = cert_path.read_bytes()
        except OSError as e:
            raise ProtocolConfigurationError(
                f"unable to read Vault certificate: {type(e).__name__}",
                context=self._error_context("initialize", correlation_id),
                cert_path=str(cert_path),
            ) from e
        if b"-----BEGIN CERTIFICATE-----" not in pem_data:
            raise ProtocolConfigurationError(
                "Vault certificate file holds no PEM certificate",
                context=self._error_context("initialize", correlation_id),
                cert_path=str(cert_path),
            )
        return str(cert_path)

    def _create_hvac_client(self, verify: str, correlation_id: UUID) -> hvac.Client:
        try:
            return hvac.Client(
                url=self._config.url,
                namespace=self._config.namespace,
                verify=verify,
                timeout=self._config.timeout_seconds,
            )
        except Exception as e:
            raise ProtocolConfigurationError(
                f"Failed to create Vault client: {type(e).__name__}",
                context=self._error_context("initialize", correlation_id),
            ) from e

    def _require_client(self, operation: str) -> hvac.Client:
        if self._client is None:
            raise RuntimeHostError(
                "VaultSecretRepository not initialized - call initialize() first",
                context=self._error_context(operation),
            )
        return self._client

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self, start_renewal: bool = True) -> None:
        """Connect, log in and start the renewal supervisor.

        Args:
            start_renewal: Start the background renewal supervisor after the
                first login

        Raises:
            ProtocolConfigurationError: If mock mode is enabled, the
                certificate cannot be read or the client cannot be built
            InfraAuthenticationError: If the first login fails
            InfraVaultError: If Vault cannot be reached for the first login
        """
        correlation_id = uuid4()
        logger.info(
            "Initializing %s",
            self.__class__.__name__,
            extra={
                "url": self._config.url,
                "mount_path": self.mount_path,
                "correlation_id": str(correlation_id),
            },
        )

        if self._config.mock.enabled:
            raise ProtocolConfigurationError(
                "Mock mode is enabled - use MockVaultSecretRepository",
                context=self._error_context("initialize", correlation_id),
            )

        verify = self._verify_certificate(correlation_id)
        self._client = self._create_hvac_client(verify, correlation_id)

        try:
            auth = self.login()
        except RuntimeHostError:
            self._client = None
            raise

        if start_renewal:
            self._supervisor = TokenRenewalSupervisor(
                login=self.login,
                watcher_factory=self.create_lifetime_watcher,
                retry_config=self._config.retry,
                tracer=self._tracer,
            )
            self._supervisor.start(initial_auth=auth)

        self._initialized = True
        logger.info(
            "%s initialized successfully",
            self.__class__.__name__,
            extra={
                "mount_path": self.mount_path,
                "namespace": self._config.namespace,
                "renewal_supervisor": start_renewal,
                "correlation_id": str(correlation_id),
            },
        )

    def shutdown(self, timeout: float | None = 10.0) -> None:
        """Stop the renewal supervisor and release the client."""
        if self._supervisor is not None:
            self._supervisor.stop(timeout)
            self._supervisor = None
        self._client = None
        self._initialized = False
        logger.info("VaultSecretRepository shutdown complete")

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def login(self) -> ModelVaultAuthInfo:
        """Exchange the AppRole credentials for a client token.

        The token is installed on the hvac client. No retry is attempted.

        Returns:
            Auth descriptor of the new token

        Raises:
            InfraAuthenticationError: If Vault rejects the login or returns
                no auth info
            InfraVaultError: If Vault cannot be reached
        """
        client = self._require_client("login")
        ctx = self._error_context("login")
        role_id = self._config.role_id
        secret_id = self._config.secret_id
        if role_id is None or secret_id is None:
            raise InfraAuthenticationError(
                "AppRole credentials are not configured",
                context=ctx,
            )

        try:
            response = client.auth.approle.login(
                role_id=role_id.get_secret_value(),
                secret_id=secret_id.get_secret_value(),
                use_token=True,
            )
        except hvac.exceptions.VaultError as e:
            raise InfraAuthenticationError(
                f"unable to authenticate to Vault: {type(e).__name__}",
                context=ctx,
            ) from e
        except Exception as e:
            raise InfraVaultError(
                f"Failed to reach Vault for login: {type(e).__name__}",
                context=ctx,
            ) from e

        auth = ModelVaultAuthInfo.from_login_response(response)
        if auth is None:
            raise InfraAuthenticationError(
                "no auth info was returned after login",
                context=ctx,
            )
        return auth

    def renew_token(self, increment_seconds: int) -> Mapping[str, object]:
        """Renew the current token by ``increment_seconds``.

        Used by the lifetime watcher; hvac errors propagate unchanged.
        """
        client = self._require_client("renew_token")
        return client.auth.token.renew_self(increment=increment_seconds)

    def create_lifetime_watcher(self, auth: ModelVaultAuthInfo) -> TokenLifetimeWatcher:
        """Build an unstarted watcher renewing ``auth``'s token."""
        return TokenLifetimeWatcher(
            renew=self.renew_token,
            auth=auth,
            increment_seconds=self._config.renewal_increment_seconds,
            min_lease_seconds=self._config.min_lease_seconds,
        )

    # -------------------------------------------------------------------------
    # Repository operations
    # -------------------------------------------------------------------------

    def fetch_bundle(self, tenant: str) -> dict[str, SecretValue]:
        """Read the tenant's KV v2 secret.

        Args:
            tenant: Tenant identifier (secret path under the mount)

        Returns:
            The tenant's bundle

        Raises:
            SecretResolutionError: If the tenant has no secret or the payload
                is not a flat mapping of scalars
            InfraAuthenticationError: If the token may not read the path
            InfraVaultError: On any other Vault or transport failure
        """
        client = self._require_client("fetch_bundle")
        ctx = self._error_context("fetch_bundle")
        secret_path = f"{self.mount_path}/{tenant}"

        try:
            response = client.secrets.kv.v2.read_secret_version(
                path=tenant,
                mount_point=self.mount_path,
                raise_on_deleted_version=True,
            )
        except hvac.exceptions.InvalidPath as e:
            raise SecretResolutionError(
                f"No secrets for tenant {tenant}",
                context=ctx,
                tenant=tenant,
            ) from e
        except hvac.exceptions.Forbidden as e:
            raise InfraAuthenticationError(
                "Vault operation forbidden - check token permissions",
                context=ctx,
                tenant=tenant,
            ) from e
        except Exception as e:
            raise InfraVaultError(
                f"Failed to read secrets for tenant {tenant}: {type(e).__name__}",
                context=ctx,
                secret_path=secret_path,
            ) from e

        data = response.get("data") if isinstance(response, Mapping) else None
        payload = data.get("data") if isinstance(data, Mapping) else None
        try:
            bundle = validate_secret_bundle(payload)
        except BundleShapeError as e:
            raise SecretResolutionError(
                f"Malformed secrets for tenant {tenant}: {e}",
                context=ctx,
                tenant=tenant,
            ) from e

        logger.debug(
            "Fetched tenant secrets from Vault",
            extra={"tenant": tenant, "keys": len(bundle)},
        )
        return bundle

    def list_tenants(self) -> list[str]:
        """List every tenant stored under the mount.

        Raises:
            SecretResolutionError: If Vault returns no listing; backend
                warnings are joined into the message and kept on ``warnings``
            InfraAuthenticationError: If the token may not list the mount
            InfraVaultError: On any other Vault or transport failure
        """
        client = self._require_client("list_tenants")
        ctx = self._error_context("list_tenants")

        try:
            response = client.list(f"{self.mount_path}/metadata")
        except hvac.exceptions.InvalidPath:
            # Vault answers 404 for an empty mount; treat it as "no data"
            response = None
        except hvac.exceptions.Forbidden as e:
            raise InfraAuthenticationError(
                "Vault operation forbidden - check token permissions",
                context=ctx,
            ) from e
        except Exception as e:
            raise InfraVaultError(
                f"Failed to list tenants: {type(e).__name__}",
                context=ctx,
                secret_path=f"{self.mount_path}/metadata",
            ) from e

        data = response.get("data") if isinstance(response, Mapping) else None
        keys = data.get("keys") if isinstance(data, Mapping) else None
        if not isinstance(keys, list):
            raw_warnings = (
                response.get("warnings") if isinstance(response, Mapping) else None
            )
            warnings = [sanitize_error_string(str(w)) for w in raw_warnings or []]
            message = "unable to list tenants"
            if warnings:
                message = f"{message}: {'; '.join(warnings)}"
            raise SecretResolutionError(message, context=ctx, warnings=warnings)

        return [str(key) for key in keys]

    def health_check(self) -> bool:
        """Return True when Vault reports itself initialized and unsealed.

        Raises:
            InfraVaultError: If the health endpoint cannot be reached
        """
        client = self._require_client("health_check")
        try:
            status = client.sys.read_health_status(method="GET")
        except Exception as e:
            raise InfraVaultError(
                f"Vault health check failed: {type(e).__name__}",
                context=self._error_context("health_check"),
            ) from e
        if not isinstance(status, Mapping):
            return False
        return bool(status.get("initialized")) and not status.get("sealed", True)

    def describe(self) -> dict[str, object]:
        """Return repository metadata without credentials."""
        return {
            "transport": EnumInfraTransportType.VAULT.value,
            "initialized": self._initialized,
            "url": self._config.url,
            "mount_path": self.mount_path,
            "namespace": self._config.namespace,
            "renewal": self._supervisor.describe() if self._supervisor else None,
        }


__all__: list[str] = ["VaultSecretRepository"]
