# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Vault login retry configuration model.

The renewal supervisor retries AppRole login forever; these values only
shape the delay between attempts.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ModelVaultRetryConfig(BaseModel):
    """Exponential backoff settings for supervisor login retries.

    Backoff calculation: initial_backoff_seconds * (exponential_base ** attempt),
    capped at max_backoff_seconds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    initial_backoff_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Delay before the first login retry",
    )
    max_backoff_seconds: float = Field(
        default=60.0,
        ge=0.0,
        le=3600.0,
        description="Upper bound for the delay between login retries",
    )
    exponential_base: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Multiplier applied to the delay after each failed login",
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> ModelVaultRetryConfig:
        if self.max_backoff_seconds < self.initial_backoff_seconds:
            raise ValueError(
                "max_backoff_seconds must be >= initial_backoff_seconds"
            )
        return self


__all__: list[str] = ["ModelVaultRetryConfig"]
