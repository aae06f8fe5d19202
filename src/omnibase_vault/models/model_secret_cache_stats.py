# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret cache statistics model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelSecretCacheStats(BaseModel):
    """Point-in-time counters for SecretService's tenant cache.

    Attributes:
        total_entries: Tenants currently cached
        hits: Bundle lookups served from the cache
        misses: Bundle lookups that went to the repository
        fetches: Successful repository fetches
        fetch_failures: Failed repository fetches (never cached)
        invalidations: Entries removed through invalidate()/invalidate_all()
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_entries: int = Field(default=0, ge=0)
    hits: int = Field(default=0, ge=0)
    misses: int = Field(default=0, ge=0)
    fetches: int = Field(default=0, ge=0)
    fetch_failures: int = Field(default=0, ge=0)
    invalidations: int = Field(default=0, ge=0)


__all__: list[str] = ["ModelSecretCacheStats"]
