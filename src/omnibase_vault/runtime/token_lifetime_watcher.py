# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Token lifetime watcher.

Keeps one Vault token alive by renewing it in the background and reports
every outcome as a ModelTokenLifecycleEvent on ``events``:

    - RENEWED(lease_duration) after each successful renewal
    - DONE(error) once the token can no longer be kept alive, after which the
      watcher thread exits

Renewal Schedule:
    The watcher sleeps ``renew_fraction`` of the current lease (two thirds by
    default) before each ``renew_self`` call, asking for
    ``increment_seconds``. When Vault answers with a lease shorter than
    ``min_lease_seconds`` (the token is reaching its max TTL) or marks the
    token as no longer renewable, the watcher finishes with DONE(None).
    A failing renewal call finishes it with DONE(error).

Thread Safety:
    ``events`` is a ``queue.Queue`` and is the only channel between the
    watcher thread and its consumer. ``stop()`` may be called from any
    thread; a stopped watcher publishes nothing further.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Mapping

from omnibase_vault.errors import InfraAuthenticationError
from omnibase_vault.models import ModelTokenLifecycleEvent, ModelVaultAuthInfo

logger = logging.getLogger(__name__)

DEFAULT_RENEW_FRACTION: float = 2.0 / 3.0

RenewFunc = Callable[[int], Mapping[str, object]]


class TokenLifetimeWatcher:
    """Background renewer for one token."""

    def __init__(
        self,
        renew: RenewFunc,
        auth: ModelVaultAuthInfo,
        increment_seconds: int,
        min_lease_seconds: int = 10,
        renew_fraction: float = DEFAULT_RENEW_FRACTION,
    ) -> None:
        """Initialize the watcher without starting it.

        Args:
            renew: Callable issuing the renewal request for an increment in
                seconds and returning the raw Vault response
            auth: Token descriptor from the login that issued the token
            increment_seconds: Lease increment requested on each renewal
            min_lease_seconds: Shortest lease still worth renewing
            renew_fraction: Fraction of the lease to wait before renewing
        """
        if not 0.0 < renew_fraction <= 1.0:
            raise ValueError("renew_fraction must be in (0, 1]")
        self._renew = renew
        self._auth = auth
        self._increment_seconds = increment_seconds
        self._min_lease_seconds = min_lease_seconds
        self._renew_fraction = renew_fraction
        self._events: queue.Queue[ModelTokenLifecycleEvent] = queue.Queue()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def events(self) -> queue.Queue[ModelTokenLifecycleEvent]:
        """Queue of RENEWED and DONE events."""
        return self._events

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the renewal thread. Calling start twice is a no-op."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run,
            name="vault_token_lifetime_watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop renewing and wait for the thread to exit."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _publish(self, event: ModelTokenLifecycleEvent) -> None:
        if not self._stop_event.is_set():
            self._events.put(event)

    def _run(self) -> None:
        lease_duration = self._auth.lease_duration
        renewable = self._auth.renewable

        while not self._stop_event.is_set():
            if not renewable or lease_duration < self._min_lease_seconds:
                logger.debug(
                    "Token lease can no longer be extended",
                    extra={
                        "lease_duration": lease_duration,
                        "renewable": renewable,
                    },
                )
                self._publish(ModelTokenLifecycleEvent.done())
                return

            if self._stop_event.wait(lease_duration * self._renew_fraction):
                return

            try:
                response = self._renew(self._increment_seconds)
            except Exception as e:
                self._publish(ModelTokenLifecycleEvent.done(e))
                return

            renewed = ModelVaultAuthInfo.from_login_response(response)
            if renewed is None:
                self._publish(
                    ModelTokenLifecycleEvent.done(
                        InfraAuthenticationError(
                            "Token renewal response carried no auth info"
                        )
                    )
                )
                return

            lease_duration = renewed.lease_duration
            renewable = renewed.renewable
            self._publish(ModelTokenLifecycleEvent.renewed(lease_duration))


__all__: list[str] = ["DEFAULT_RENEW_FRACTION", "TokenLifetimeWatcher"]
