# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Runtime components for omnibase_vault.

This module provides:
    - SecretService: Cache-or-fetch tenant secret access with typed accessors
    - TokenRenewalSupervisor: Background login / renew / re-login loop
    - TokenLifetimeWatcher: Background renewal of a single token

The configuration loader (``runtime.config_loader``) and service wiring
(``runtime.wiring``) depend on the handlers package and are imported from
their modules directly.
"""

from omnibase_vault.runtime.secret_service import SecretService
from omnibase_vault.runtime.token_lifetime_watcher import TokenLifetimeWatcher
from omnibase_vault.runtime.token_renewal_supervisor import TokenRenewalSupervisor

__all__: list[str] = [
    "SecretService",
    "TokenLifetimeWatcher",
    "TokenRenewalSupervisor",
]
