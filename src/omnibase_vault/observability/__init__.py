# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Observability helpers (OpenTelemetry tracing)."""

from omnibase_vault.observability.tracer import VaultTracer

__all__: list[str] = ["VaultTracer"]
