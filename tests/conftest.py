# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pytest configuration and shared fixtures for omnibase_vault tests."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)
from pydantic import SecretStr

from omnibase_vault.handlers.handler_vault_mock import MockVaultSecretRepository
from omnibase_vault.handlers.model_vault_handler_config import ModelVaultHandlerConfig
from omnibase_vault.handlers.model_vault_retry_config import ModelVaultRetryConfig
from omnibase_vault.observability import VaultTracer
from omnibase_vault.runtime.secret_service import SecretService

TEST_CERT_PEM: str = (
    "-----BEGIN CERTIFICATE-----\n"
    "MIIBszCCAVmgAwIBAgIUTestCertificateOnly\n"
    "-----END CERTIFICATE-----\n"
)


# =============================================================================
# Duck Typing Conformance Helpers
# =============================================================================


def assert_has_methods(
    obj: object,
    required_methods: list[str],
    *,
    protocol_name: str | None = None,
) -> None:
    """Assert that an object has all required methods (duck typing conformance).

    Args:
        obj: The object to check for method presence.
        required_methods: List of method names that must be present and callable.
        protocol_name: Optional protocol name for clearer error messages.

    Raises:
        AssertionError: If any required method is missing or not callable.
    """
    name = protocol_name or obj.__class__.__name__
    for method_name in required_methods:
        assert hasattr(obj, method_name), f"{name} must have '{method_name}' method"
        assert callable(
            getattr(obj, method_name)
        ), f"{name}.{method_name} must be callable"


def wait_until(
    predicate: Callable[[], bool],
    timeout: float = 5.0,
    interval: float = 0.01,
) -> bool:
    """Poll ``predicate`` until it returns True or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    """Provide ``wait_until`` for tests driving background threads."""
    return wait_until


# =============================================================================
# Tenant Data Fixtures
# =============================================================================


@pytest.fixture
def tenant_data() -> dict[str, dict[str, str]]:
    """Provide the two-tenant mock data set."""
    return {
        "client1": {
            "ENV_1": "val 1",
            "ENV_2": "true",
            "ENV_3": "val 2",
            "ENV_4": "5",
        },
        "client2": {
            "VAR": "value",
            "OTHER_VAR": "value",
        },
    }


@pytest.fixture
def mock_repository(
    tenant_data: dict[str, dict[str, str]],
) -> MockVaultSecretRepository:
    """Provide a mock repository over ``tenant_data``."""
    return MockVaultSecretRepository(tenant_data)


@pytest.fixture
def secret_service(mock_repository: MockVaultSecretRepository) -> SecretService:
    """Provide a SecretService over the mock repository."""
    return SecretService(mock_repository)


# =============================================================================
# Vault Fixtures
# =============================================================================


@pytest.fixture
def cert_file(tmp_path: Path) -> Path:
    """Provide a PEM file usable as the Vault CA certificate."""
    path = tmp_path / "vault-ca.pem"
    path.write_text(TEST_CERT_PEM)
    return path


@pytest.fixture
def vault_config(cert_file: Path) -> ModelVaultHandlerConfig:
    """Provide a valid live-mode Vault configuration."""
    return ModelVaultHandlerConfig(
        role_id=SecretStr("test-role-id"),
        secret_id=SecretStr("test-secret-id"),
        url="https://vault.example.com:8200",
        mount_path="/tenants/",
        cert_path=cert_file,
        retry=ModelVaultRetryConfig(
            initial_backoff_seconds=0.01,
            max_backoff_seconds=0.05,
        ),
    )


@pytest.fixture
def login_response() -> dict[str, object]:
    """Provide an AppRole login response with a renewable token."""
    return {
        "auth": {
            "client_token": "hvs.test-token",
            "accessor": "accessor-1",
            "lease_duration": 3600,
            "renewable": True,
            "policies": ["default", "tenant-reader"],
        }
    }


@pytest.fixture
def mock_hvac_client(login_response: dict[str, object]) -> MagicMock:
    """Provide mocked hvac.Client."""
    client = MagicMock()
    client.auth.approle.login.return_value = login_response
    client.secrets.kv.v2.read_secret_version.return_value = {
        "data": {
            "data": {"DATABASE_HOST": "db.internal", "DATABASE_USER": "app"},
            "metadata": {"version": 3},
        }
    }
    client.list.return_value = {"data": {"keys": ["client1", "client2"]}}
    return client


# =============================================================================
# Tracing Fixtures
# =============================================================================


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """Provide an in-memory span exporter."""
    return InMemorySpanExporter()


@pytest.fixture
def vault_tracer(span_exporter: InMemorySpanExporter) -> Iterator[VaultTracer]:
    """Provide a VaultTracer recording into ``span_exporter``.

    Uses a private TracerProvider so the global provider is left untouched.
    """
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    yield VaultTracer(provider.get_tracer("omnibase_vault.tests"))
    provider.shutdown()
