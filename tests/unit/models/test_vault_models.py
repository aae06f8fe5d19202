# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for omnibase_vault models."""

from __future__ import annotations

import pytest
from pydantic import SecretStr, ValidationError

from omnibase_vault.enums import EnumTokenLifecycleEventType
from omnibase_vault.models import (
    ModelDbInstanceConfig,
    ModelRetryState,
    ModelSecretCacheStats,
    ModelTokenLifecycleEvent,
    ModelVaultAuthInfo,
)


class TestModelVaultAuthInfo:
    """Login response parsing tests."""

    def test_from_login_response(self, login_response: dict[str, object]) -> None:
        auth = ModelVaultAuthInfo.from_login_response(login_response)

        assert auth is not None
        assert auth.client_token.get_secret_value() == "hvs.test-token"
        assert auth.lease_duration == 3600
        assert auth.renewable is True
        assert auth.policies == ["default", "tenant-reader"]

    def test_token_not_in_repr(self, login_response: dict[str, object]) -> None:
        auth = ModelVaultAuthInfo.from_login_response(login_response)

        assert "hvs.test-token" not in repr(auth)

    @pytest.mark.parametrize(
        "response",
        [
            None,
            {},
            {"auth": None},
            {"auth": {"lease_duration": 60}},
            {"auth": {"client_token": ""}},
        ],
    )
    def test_missing_auth_info(self, response: object) -> None:
        assert ModelVaultAuthInfo.from_login_response(response) is None

    def test_missing_optional_fields_default(self) -> None:
        auth = ModelVaultAuthInfo.from_login_response({"auth": {"client_token": "t"}})

        assert auth is not None
        assert auth.lease_duration == 0
        assert auth.renewable is False
        assert auth.policies == []


class TestModelRetryState:
    """Backoff progression tests."""

    def test_first_failure_uses_initial_delay(self) -> None:
        state = ModelRetryState(delay_seconds=1.0, backoff_multiplier=2.0)

        state = state.next_attempt("boom", max_delay_seconds=60.0)

        assert state.attempt == 1
        assert state.delay_seconds == 1.0
        assert state.last_error == "boom"

    def test_delay_grows_and_caps(self) -> None:
        state = ModelRetryState(delay_seconds=1.0, backoff_multiplier=2.0)
        delays = []
        for _ in range(5):
            state = state.next_attempt("boom", max_delay_seconds=5.0)
            delays.append(state.delay_seconds)

        assert delays == [1.0, 2.0, 4.0, 5.0, 5.0]

    def test_records_attempt_and_last_error(self) -> None:
        state = ModelRetryState().next_attempt("a", 1.0).next_attempt("b", 1.0)

        assert state.attempt == 2
        assert state.last_error == "b"


class TestModelTokenLifecycleEvent:
    def test_renewed(self) -> None:
        event = ModelTokenLifecycleEvent.renewed(1800)

        assert event.event_type == EnumTokenLifecycleEventType.RENEWED
        assert event.lease_duration == 1800
        assert event.error is None

    def test_done_with_error(self) -> None:
        error = RuntimeError("renewal failed")
        event = ModelTokenLifecycleEvent.done(error)

        assert event.event_type == EnumTokenLifecycleEventType.DONE
        assert event.error is error


class TestValueModels:
    def test_cache_stats_frozen(self) -> None:
        stats = ModelSecretCacheStats(total_entries=1, hits=2)

        with pytest.raises(ValidationError):
            stats.hits = 3  # type: ignore[misc]

    def test_db_instance_config_hides_password(self) -> None:
        config = ModelDbInstanceConfig(
            host="db", name="app", password=SecretStr("pw"), user="u"
        )

        assert "pw" not in repr(config)
        assert config.password.get_secret_value() == "pw"

    def test_db_instance_config_defaults(self) -> None:
        config = ModelDbInstanceConfig()

        assert (config.host, config.name, config.user) == ("", "", "")
        assert config.password.get_secret_value() == ""
