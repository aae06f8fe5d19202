# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Token lifecycle event enumerations.

EnumTokenLifecycleEventType is what the lifetime watcher publishes.
EnumTokenRenewalOutcome is what the renewal supervisor records as span events.
"""

from enum import Enum


class EnumTokenLifecycleEventType(str, Enum):
    """Events published by TokenLifetimeWatcher.

    Attributes:
        RENEWED: The token was renewed and the watcher keeps running
        DONE: The watcher stopped renewing; the token must be replaced
    """

    RENEWED = "renewed"
    DONE = "done"


class EnumTokenRenewalOutcome(str, Enum):
    """Renewal outcomes traced by TokenRenewalSupervisor."""

    RENEWED = "token_renewed"
    EXPIRED = "token_expired"
    FAILED = "token_renewal_failed"
    NOT_RENEWABLE = "token_not_renewable"


__all__ = ["EnumTokenLifecycleEventType", "EnumTokenRenewalOutcome"]
