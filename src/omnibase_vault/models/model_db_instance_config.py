# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Per-tenant database connection settings read from the secret store."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ModelDbInstanceConfig(BaseModel):
    """Database settings assembled from DATABASE_* secrets.

    Missing keys resolve to empty strings, matching get_secret_as_string.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = Field(default="", description="DATABASE_HOST")
    name: str = Field(default="", description="DATABASE_NAME")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="DATABASE_PASS",
    )
    user: str = Field(default="", description="DATABASE_USER")


__all__: list[str] = ["ModelDbInstanceConfig"]
