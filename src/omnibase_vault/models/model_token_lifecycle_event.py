# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Events published by the token lifetime watcher."""

from __future__ import annotations

from dataclasses import dataclass

from omnibase_vault.enums import EnumTokenLifecycleEventType


@dataclass(frozen=True)
class ModelTokenLifecycleEvent:
    """One renewal outcome.

    Attributes:
        event_type: RENEWED or DONE
        lease_duration: New lease in seconds (RENEWED only)
        error: Renewal failure that ended the watcher (DONE only, optional)
    """

    event_type: EnumTokenLifecycleEventType
    lease_duration: int | None = None
    error: BaseException | None = None

    @classmethod
    def renewed(cls, lease_duration: int) -> ModelTokenLifecycleEvent:
        return cls(EnumTokenLifecycleEventType.RENEWED, lease_duration=lease_duration)

    @classmethod
    def done(cls, error: BaseException | None = None) -> ModelTokenLifecycleEvent:
        return cls(EnumTokenLifecycleEventType.DONE, error=error)


__all__: list[str] = ["ModelTokenLifecycleEvent"]
