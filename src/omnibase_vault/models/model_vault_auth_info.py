# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Auth descriptor returned by an AppRole login."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ModelVaultAuthInfo(BaseModel):
    """Token issued by Vault, as seen by the renewal supervisor.

    The token never leaves VaultSecretRepository and its supervisor;
    ``client_token`` is a SecretStr so it cannot be logged by accident.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    client_token: SecretStr
    accessor: str | None = None
    lease_duration: int = Field(default=0, ge=0)
    renewable: bool = False
    policies: list[str] = Field(default_factory=list)

    @classmethod
    def from_login_response(cls, response: object) -> ModelVaultAuthInfo | None:
        """Build the descriptor from an hvac login response.

        Returns None when the response carries no ``auth`` block or no token.
        """
        if not isinstance(response, Mapping):
            return None
        auth = response.get("auth")
        if not isinstance(auth, Mapping) or not auth.get("client_token"):
            return None
        return cls(
            client_token=SecretStr(str(auth["client_token"])),
            accessor=auth.get("accessor"),
            lease_duration=int(auth.get("lease_duration") or 0),
            renewable=bool(auth.get("renewable", False)),
            policies=list(auth.get("policies") or []),
        )


__all__: list[str] = ["ModelVaultAuthInfo"]
