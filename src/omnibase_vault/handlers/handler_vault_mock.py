# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory tenant secret repository.

Deterministic stand-in for VaultSecretRepository used in tests and in
``mock.enabled`` deployments. Bundles come from a dict or a JSON file shaped
``{tenant: {key: scalar}}``.

Every ``fetch_bundle`` call is counted per tenant, including calls for
unknown tenants, so tests can assert how often the backend was reached.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping
from pathlib import Path

from omnibase_vault.enums import EnumInfraTransportType
from omnibase_vault.errors import (
    ModelInfraErrorContext,
    ProtocolConfigurationError,
    SecretResolutionError,
)
from omnibase_vault.types import SecretValue
from omnibase_vault.utils import BundleShapeError, validate_secret_bundle

logger = logging.getLogger(__name__)

TARGET_NAME: str = "mock_vault_repository"


def _mock_context(operation: str) -> ModelInfraErrorContext:
    return ModelInfraErrorContext.with_correlation(
        transport_type=EnumInfraTransportType.MOCK,
        operation=operation,
        target_name=TARGET_NAME,
    )


class MockVaultSecretRepository:
    """Tenant bundles served from memory.

    Example:
        >>> repository = MockVaultSecretRepository(
        ...     {"client1": {"ENV_1": "val 1", "ENV_2": "true"}}
        ... )
        >>> repository.fetch_bundle("client1")["ENV_1"]
        'val 1'
        >>> repository.number_of_calls("client1")
        1
    """

    def __init__(self, data: Mapping[str, Mapping[str, SecretValue]]) -> None:
        """Initialize with ``{tenant: bundle}`` data.

        Raises:
            ProtocolConfigurationError: If a bundle is not a flat mapping of
                scalars
        """
        self._lock = threading.Lock()
        self._data: dict[str, dict[str, SecretValue]] = {}
        self._calls: dict[str, int] = {}
        for tenant, bundle in data.items():
            self._data[str(tenant)] = self._checked_bundle(tenant, bundle, "__init__")

    @classmethod
    def from_json_file(cls, path: str | Path | None) -> MockVaultSecretRepository:
        """Load tenant bundles from a JSON file.

        Args:
            path: JSON file holding ``{tenant: {key: scalar}}``

        Raises:
            ProtocolConfigurationError: If no path is given, the file cannot
                be read, is not valid JSON or has the wrong shape
        """
        if path is None or str(path) == "":
            raise ProtocolConfigurationError(
                "mocked json file name not provided",
                context=_mock_context("from_json_file"),
            )

        file_path = Path(path)
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ProtocolConfigurationError(
                f"Unable to read mocked json file {file_path}: {type(e).__name__}",
                context=_mock_context("from_json_file"),
            ) from e

        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            raise ProtocolConfigurationError(
                f"Invalid JSON in mocked json file {file_path}: {e.msg} "
                f"(line {e.lineno})",
                context=_mock_context("from_json_file"),
            ) from e

        if not isinstance(document, dict):
            raise ProtocolConfigurationError(
                f"Mocked json file must hold an object of tenants, "
                f"got {type(document).__name__}",
                context=_mock_context("from_json_file"),
            )

        logger.info(
            "Loaded mock tenant secrets",
            extra={"json_file": str(file_path), "tenants": len(document)},
        )
        return cls(document)

    @staticmethod
    def _checked_bundle(
        tenant: object, bundle: object, operation: str
    ) -> dict[str, SecretValue]:
        try:
            return validate_secret_bundle(bundle)
        except BundleShapeError as e:
            raise ProtocolConfigurationError(
                f"Invalid mock secrets for tenant {tenant}: {e}",
                context=_mock_context(operation),
            ) from e

    def fetch_bundle(self, tenant: str) -> dict[str, SecretValue]:
        """Return a copy of the tenant's bundle and count the call.

        Raises:
            SecretResolutionError: If the tenant has no bundle
        """
        with self._lock:
            self._calls[tenant] = self._calls.get(tenant, 0) + 1
            bundle = self._data.get(tenant)
            if bundle is not None:
                bundle = dict(bundle)

        if bundle is None:
            raise SecretResolutionError(
                f"No secrets for tenant {tenant}",
                context=_mock_context("fetch_bundle"),
                tenant=tenant,
            )
        return bundle

    def list_tenants(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def number_of_calls(self, tenant: str) -> int:
        """Return how many times ``fetch_bundle`` was called for ``tenant``."""
        with self._lock:
            return self._calls.get(tenant, 0)

    def set_bundle(self, tenant: str, bundle: Mapping[str, SecretValue]) -> None:
        """Replace the tenant's bundle; cached copies elsewhere are unaffected."""
        checked = self._checked_bundle(tenant, bundle, "set_bundle")
        with self._lock:
            self._data[tenant] = checked

    def describe(self) -> dict[str, object]:
        """Return repository metadata (tenant names only, never values)."""
        with self._lock:
            return {
                "transport": EnumInfraTransportType.MOCK.value,
                "initialized": True,
                "tenants": sorted(self._data),
                "calls": dict(self._calls),
            }


__all__: list[str] = ["MockVaultSecretRepository"]
