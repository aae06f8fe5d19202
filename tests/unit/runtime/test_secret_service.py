# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for SecretService.

These tests run the service against MockVaultSecretRepository, covering:
- Raw, string and filtered secret access
- Cache-or-fetch behavior and fetch deduplication
- Fetch failures never cached
- Binding bundles onto pydantic models
- Invalidation and cache statistics
- Async facades
"""

from __future__ import annotations

from collections.abc import Mapping

import pytest
from pydantic import BaseModel, ConfigDict, Field

from omnibase_vault.errors import (
    SecretBindingError,
    SecretResolutionError,
    SecretTypeError,
)
from omnibase_vault.handlers.handler_vault_mock import MockVaultSecretRepository
from omnibase_vault.protocols import ProtocolSecretRepository
from omnibase_vault.runtime.secret_service import SecretService
from omnibase_vault.types import SecretValue


class ClientEnv(BaseModel):
    """Secrets of the client1 test tenant."""

    model_config = ConfigDict(populate_by_name=True)

    env_1: str = Field(alias="ENV_1")
    env_2: bool = Field(default=False, alias="ENV_2")
    env_3: str = Field(default="", alias="ENV_3")
    env_4: int = Field(default=0, alias="ENV_4")


class DatabaseSettings(BaseModel):
    host: str
    port: int = 5432
    debug: bool = False


class NestedEnv(BaseModel):
    db: DatabaseSettings
    name: str = "default"


class FlakyRepository:
    """Repository failing the first ``failures`` fetches of every tenant."""

    def __init__(self, data: dict[str, dict[str, SecretValue]], failures: int) -> None:
        self._data = data
        self._failures = failures
        self.calls: dict[str, int] = {}

    def fetch_bundle(self, tenant: str) -> Mapping[str, SecretValue]:
        self.calls[tenant] = self.calls.get(tenant, 0) + 1
        if self.calls[tenant] <= self._failures:
            raise SecretResolutionError(f"temporary failure for {tenant}")
        return dict(self._data[tenant])

    def list_tenants(self) -> list[str]:
        return list(self._data)


class TestSecretServiceGetSecret:
    """get_secret tests."""

    def test_returns_stored_value(self, secret_service: SecretService) -> None:
        assert secret_service.get_secret("client1", "ENV_2") == "true"

    def test_absent_key_returns_none(self, secret_service: SecretService) -> None:
        """Should not treat an absent key as an error."""
        assert secret_service.get_secret("client1", "NOT_THERE") is None

    def test_unknown_tenant_raises(self, secret_service: SecretService) -> None:
        with pytest.raises(SecretResolutionError, match="No secrets for tenant client3"):
            secret_service.get_secret("client3", "ENV_1")

    def test_non_string_values_returned_raw(self) -> None:
        service = SecretService(
            MockVaultSecretRepository({"t": {"FLAG": True, "COUNT": 3, "RATIO": 0.5}})
        )

        assert service.get_secret("t", "FLAG") is True
        assert service.get_secret("t", "COUNT") == 3
        assert service.get_secret("t", "RATIO") == 0.5


class TestSecretServiceGetSecretAsString:
    """get_secret_as_string tests."""

    def test_returns_string(self, secret_service: SecretService) -> None:
        assert secret_service.get_secret_as_string("client1", "ENV_1") == "val 1"

    def test_absent_key_returns_empty_string(
        self, secret_service: SecretService
    ) -> None:
        assert secret_service.get_secret_as_string("client1", "NOT_THERE") == ""

    def test_non_string_value_raises_type_error(self) -> None:
        service = SecretService(MockVaultSecretRepository({"t": {"FLAG": True}}))

        with pytest.raises(SecretTypeError) as exc_info:
            service.get_secret_as_string("t", "FLAG")

        assert exc_info.value.context["key"] == "FLAG"
        assert exc_info.value.context["actual_type"] == "bool"

    def test_unknown_tenant_raises(self, secret_service: SecretService) -> None:
        with pytest.raises(SecretResolutionError):
            secret_service.get_secret_as_string("client3", "ENV_1")


class TestSecretServiceGetSecrets:
    """get_secrets tests."""

    def test_filters_requested_keys(self, secret_service: SecretService) -> None:
        result = secret_service.get_secrets("client1", ["ENV_1", "ENV_4"])

        assert result == {"ENV_1": "val 1", "ENV_4": "5"}

    def test_absent_keys_are_omitted(self, secret_service: SecretService) -> None:
        result = secret_service.get_secrets("client2", ["VAR", "MISSING"])

        assert result == {"VAR": "value"}

    def test_no_keys_returns_empty(self, secret_service: SecretService) -> None:
        assert secret_service.get_secrets("client2", []) == {}

    def test_unknown_tenant_raises(self, secret_service: SecretService) -> None:
        with pytest.raises(SecretResolutionError):
            secret_service.get_secrets("client3", ["ENV_1", "ENV_2"])

    def test_result_is_a_detached_dict(self, secret_service: SecretService) -> None:
        result = secret_service.get_secrets("client2", ["VAR"])
        result["VAR"] = "changed"

        assert secret_service.get_secret("client2", "VAR") == "value"


class TestSecretServiceCaching:
    """Cache-or-fetch tests."""

    def test_fetches_once_per_tenant(
        self,
        secret_service: SecretService,
        mock_repository: MockVaultSecretRepository,
    ) -> None:
        """Should never reach the repository again after the first fetch."""
        secret_service.get_secret("client1", "ENV_1")
        secret_service.get_secrets("client1", ["ENV_2", "ENV_3"])
        secret_service.get_secret_as_string("client1", "ENV_4")
        secret_service.read_secrets("client1", ClientEnv)

        assert mock_repository.number_of_calls("client1") == 1

    def test_tenants_cached_independently(
        self,
        secret_service: SecretService,
        mock_repository: MockVaultSecretRepository,
    ) -> None:
        secret_service.get_secret("client1", "ENV_1")
        secret_service.get_secret("client2", "VAR")
        secret_service.get_secret("client2", "OTHER_VAR")

        assert mock_repository.number_of_calls("client1") == 1
        assert mock_repository.number_of_calls("client2") == 1

    def test_failed_fetch_not_cached(
        self,
        secret_service: SecretService,
        mock_repository: MockVaultSecretRepository,
    ) -> None:
        """Should fetch again after a failure for an unknown tenant."""
        for _ in range(3):
            with pytest.raises(SecretResolutionError):
                secret_service.get_secret("client3", "ENV_1")

        assert mock_repository.number_of_calls("client3") == 3

    def test_retry_after_failure_performs_real_fetch(self) -> None:
        repository = FlakyRepository({"client1": {"ENV_1": "val 1"}}, failures=1)
        service = SecretService(repository)

        with pytest.raises(SecretResolutionError):
            service.get_secret("client1", "ENV_1")

        assert service.get_secret("client1", "ENV_1") == "val 1"
        assert service.get_secret("client1", "ENV_1") == "val 1"
        assert repository.calls["client1"] == 2

    def test_failure_for_one_tenant_keeps_other_cached(
        self,
        secret_service: SecretService,
        mock_repository: MockVaultSecretRepository,
    ) -> None:
        secret_service.get_secret("client1", "ENV_1")
        with pytest.raises(SecretResolutionError):
            secret_service.get_secret("client3", "ENV_1")

        assert secret_service.get_secret("client1", "ENV_1") == "val 1"
        assert mock_repository.number_of_calls("client1") == 1

    def test_cached_bundle_unaffected_by_backend_changes(
        self,
        secret_service: SecretService,
        mock_repository: MockVaultSecretRepository,
    ) -> None:
        secret_service.get_secret("client2", "VAR")
        mock_repository.set_bundle("client2", {"VAR": "rotated"})

        assert secret_service.get_secret("client2", "VAR") == "value"

    def test_invalidate_forces_refetch(
        self,
        secret_service: SecretService,
        mock_repository: MockVaultSecretRepository,
    ) -> None:
        secret_service.get_secret("client2", "VAR")
        mock_repository.set_bundle("client2", {"VAR": "rotated"})

        assert secret_service.invalidate("client2") is True
        assert secret_service.get_secret("client2", "VAR") == "rotated"
        assert mock_repository.number_of_calls("client2") == 2

    def test_invalidate_unknown_tenant(self, secret_service: SecretService) -> None:
        assert secret_service.invalidate("never-fetched") is False

    def test_invalidate_all(
        self,
        secret_service: SecretService,
        mock_repository: MockVaultSecretRepository,
    ) -> None:
        secret_service.get_secret("client1", "ENV_1")
        secret_service.get_secret("client2", "VAR")

        assert secret_service.invalidate_all() == 2

        secret_service.get_secret("client1", "ENV_1")
        assert mock_repository.number_of_calls("client1") == 2

    def test_cache_stats(self, secret_service: SecretService) -> None:
        secret_service.get_secret("client1", "ENV_1")
        secret_service.get_secret("client1", "ENV_2")
        secret_service.get_secret("client1", "ENV_3")
        with pytest.raises(SecretResolutionError):
            secret_service.get_secret("client3", "ENV_1")
        secret_service.invalidate("client1")

        stats = secret_service.get_cache_stats()

        assert stats.total_entries == 0
        assert stats.hits == 2
        assert stats.misses == 2
        assert stats.fetches == 1
        assert stats.fetch_failures == 1
        assert stats.invalidations == 1

    def test_uncoalesced_service_still_caches(
        self, mock_repository: MockVaultSecretRepository
    ) -> None:
        service = SecretService(mock_repository, coalesce_fetches=False)

        service.get_secret("client1", "ENV_1")
        service.get_secret("client1", "ENV_2")

        assert mock_repository.number_of_calls("client1") == 1


class TestSecretServiceReadSecrets:
    """read_secrets binding tests."""

    def test_binds_and_coerces(self, secret_service: SecretService) -> None:
        env = secret_service.read_secrets("client1", ClientEnv)

        assert env == ClientEnv(env_1="val 1", env_2=True, env_3="val 2", env_4=5)

    def test_binding_is_idempotent(self, secret_service: SecretService) -> None:
        first = secret_service.read_secrets("client1", ClientEnv)
        second = secret_service.read_secrets("client1", ClientEnv)

        assert first == second
        assert first is not second

    def test_empty_string_binds_zero_value(self) -> None:
        """Should bind "" to False for a bool field without error."""
        service = SecretService(
            MockVaultSecretRepository({"t": {"ENV_1": "value", "ENV_2": "", "ENV_4": ""}})
        )

        env = service.read_secrets("t", ClientEnv)

        assert env.env_1 == "value"
        assert env.env_2 is False
        assert env.env_4 == 0
        assert env.env_3 == ""

    def test_absent_fields_keep_defaults(self) -> None:
        service = SecretService(MockVaultSecretRepository({"t": {"ENV_1": "value"}}))

        env = service.read_secrets("t", ClientEnv)

        assert env.env_2 is False
        assert env.env_3 == ""
        assert env.env_4 == 0

    def test_missing_required_field_raises(self, secret_service: SecretService) -> None:
        with pytest.raises(SecretBindingError) as exc_info:
            secret_service.read_secrets("client2", ClientEnv)

        error = exc_info.value
        assert "ENV_1" in str(error)
        assert error.errors[0]["type"] == "missing"
        assert all("input" not in err for err in error.errors)

    def test_binding_error_hides_values(self) -> None:
        service = SecretService(
            MockVaultSecretRepository({"t": {"ENV_1": "ok", "ENV_4": "s3cr3t-not-int"}})
        )

        with pytest.raises(SecretBindingError) as exc_info:
            service.read_secrets("t", ClientEnv)

        assert "s3cr3t-not-int" not in str(exc_info.value)
        assert "s3cr3t-not-int" not in repr(exc_info.value.errors)
        assert exc_info.value.__cause__ is None

    def test_dotted_keys_bind_nested_models(self) -> None:
        service = SecretService(
            MockVaultSecretRepository(
                {"t": {"db.host": "db.internal", "db.port": "6543", "db.debug": ""}}
            )
        )

        env = service.read_secrets("t", NestedEnv)

        assert env.db == DatabaseSettings(host="db.internal", port=6543, debug=False)
        assert env.name == "default"

    def test_unknown_tenant_raises_resolution_error(
        self, secret_service: SecretService
    ) -> None:
        with pytest.raises(SecretResolutionError):
            secret_service.read_secrets("client3", ClientEnv)

    def test_numbers_and_booleans_bind_to_string_fields(self) -> None:
        """Should bind JSON numbers and booleans onto str fields as text."""

        class ConnectionEnv(BaseModel):
            port: str = Field(alias="DB_PORT")
            ratio: str = Field(alias="RATIO")
            whole: str = Field(alias="WHOLE")
            enabled: str = Field(alias="ENABLED")
            disabled: str | None = Field(default=None, alias="DISABLED")

        service = SecretService(
            MockVaultSecretRepository(
                {
                    "t": {
                        "DB_PORT": 5432,
                        "RATIO": 0.5,
                        "WHOLE": 3.0,
                        "ENABLED": True,
                        "DISABLED": False,
                    }
                }
            )
        )

        env = service.read_secrets("t", ConnectionEnv)

        assert env.port == "5432"
        assert env.ratio == "0.5"
        assert env.whole == "3"
        assert env.enabled == "1"
        assert env.disabled == "0"

    def test_numbers_bind_to_nested_string_fields(self) -> None:
        service = SecretService(
            MockVaultSecretRepository({"t": {"db.host": 10, "db.port": "6543"}})
        )

        env = service.read_secrets("t", NestedEnv)

        assert env.db.host == "10"
        assert env.db.port == 6543


class TestSecretServiceList:
    """list tests."""

    def test_lists_tenants(self, secret_service: SecretService) -> None:
        assert sorted(secret_service.list()) == ["client1", "client2"]

    def test_list_is_not_cached(
        self, secret_service: SecretService, mock_repository: MockVaultSecretRepository
    ) -> None:
        secret_service.list()
        mock_repository.set_bundle("client9", {"A": "b"})

        assert "client9" in secret_service.list()


class TestSecretServiceDbInstanceConfig:
    """get_db_instance_config tests."""

    def test_builds_db_config(self) -> None:
        service = SecretService(
            MockVaultSecretRepository(
                {
                    "client1": {
                        "DATABASE_HOST": "localhost",
                        "DATABASE_NAME": "client1_db",
                        "DATABASE_USER": "root",
                        "DATABASE_PASS": "pw",
                    }
                }
            )
        )

        config = service.get_db_instance_config("client1")

        assert config.host == "localhost"
        assert config.name == "client1_db"
        assert config.user == "root"
        assert config.password.get_secret_value() == "pw"

    def test_missing_keys_become_empty(self, secret_service: SecretService) -> None:
        config = secret_service.get_db_instance_config("client2")

        assert config.host == ""
        assert config.password.get_secret_value() == ""


class TestSecretServiceAsync:
    """Async facade tests."""

    @pytest.mark.asyncio
    async def test_get_secret_async(self, secret_service: SecretService) -> None:
        assert await secret_service.get_secret_async("client1", "ENV_1") == "val 1"

    @pytest.mark.asyncio
    async def test_get_secrets_async(self, secret_service: SecretService) -> None:
        result = await secret_service.get_secrets_async("client1", iter(["ENV_2"]))

        assert result == {"ENV_2": "true"}

    @pytest.mark.asyncio
    async def test_list_async(self, secret_service: SecretService) -> None:
        assert sorted(await secret_service.list_async()) == ["client1", "client2"]

    @pytest.mark.asyncio
    async def test_get_secret_as_string_async(
        self, secret_service: SecretService
    ) -> None:
        value = await secret_service.get_secret_as_string_async("client1", "ENV_3")

        assert value == "val 2"

    @pytest.mark.asyncio
    async def test_read_secrets_async(self, secret_service: SecretService) -> None:
        env = await secret_service.read_secrets_async("client1", ClientEnv)

        assert env == ClientEnv(env_1="val 1", env_2=True, env_3="val 2", env_4=5)

    @pytest.mark.asyncio
    async def test_async_errors_propagate(self, secret_service: SecretService) -> None:
        with pytest.raises(SecretResolutionError):
            await secret_service.get_secret_async("client3", "ENV_1")


class TestProtocolConformance:
    def test_mock_repository_satisfies_protocol(
        self, mock_repository: MockVaultSecretRepository
    ) -> None:
        assert isinstance(mock_repository, ProtocolSecretRepository)

    def test_custom_repository_satisfies_protocol(self) -> None:
        assert isinstance(FlakyRepository({}, failures=0), ProtocolSecretRepository)
