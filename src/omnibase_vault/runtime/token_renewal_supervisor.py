# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Self-healing Vault token renewal supervisor.

The supervisor keeps an authenticated Vault session alive for the life of
the owning process without ever blocking secret lookups. It runs one daemon
thread looping over two phases:

    1. Login phase: call ``login()``. A failure is traced and retried after
       an exponential backoff (interruptible by ``stop()``).
    2. Lifecycle-watch phase: a non-renewable token is traced, kept until
       its lease is mostly spent, then replaced by a fresh login. A renewable
       token gets a TokenLifetimeWatcher; RENEWED events are traced and the
       watch continues, any DONE event (with or without error) stops the
       watcher and returns to phase 1.

Tracing:
    One span per login attempt ("vault.token_login") and one per lifecycle
    event ("vault.token_lifecycle"), tagged with EnumTokenRenewalOutcome
    events: token_renewed, token_expired, token_renewal_failed,
    token_not_renewable.

Shutdown:
    ``stop()`` sets a threading.Event checked by every wait in the loop,
    stops the active watcher and joins the thread.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

from omnibase_vault.enums import EnumTokenLifecycleEventType, EnumTokenRenewalOutcome
from omnibase_vault.models import (
    ModelRetryState,
    ModelTokenLifecycleEvent,
    ModelVaultAuthInfo,
)
from omnibase_vault.observability import VaultTracer
from omnibase_vault.runtime.token_lifetime_watcher import (
    DEFAULT_RENEW_FRACTION,
    TokenLifetimeWatcher,
)
from omnibase_vault.utils import sanitize_error_message

if TYPE_CHECKING:
    from omnibase_vault.handlers.model_vault_retry_config import ModelVaultRetryConfig

logger = logging.getLogger(__name__)

TRACE_COMPONENT: str = "vault"

LoginFunc = Callable[[], ModelVaultAuthInfo]
WatcherFactory = Callable[[ModelVaultAuthInfo], TokenLifetimeWatcher]


class TokenRenewalSupervisor:
    """Background login / renew / re-login loop for one Vault session.

    Example:
        >>> supervisor = TokenRenewalSupervisor(
        ...     login=repository.login,
        ...     watcher_factory=repository.create_lifetime_watcher,
        ...     retry_config=config.retry,
        ... )
        >>> supervisor.start(initial_auth=auth)
        >>> ...
        >>> supervisor.stop()
    """

    def __init__(
        self,
        login: LoginFunc,
        watcher_factory: WatcherFactory,
        retry_config: ModelVaultRetryConfig,
        tracer: VaultTracer | None = None,
        event_poll_interval_seconds: float = 0.25,
        non_renewable_fraction: float = DEFAULT_RENEW_FRACTION,
    ) -> None:
        """Initialize the supervisor without starting it.

        Args:
            login: Performs one AppRole login, raising on failure
            watcher_factory: Builds an unstarted watcher for a token
            retry_config: Backoff between failed logins
            tracer: Span helper; defaults to the global OpenTelemetry tracer
            event_poll_interval_seconds: How often the watch phase checks
                for shutdown while waiting for watcher events
            non_renewable_fraction: Fraction of a non-renewable token's lease
                to wait before logging in again
        """
        self._login = login
        self._watcher_factory = watcher_factory
        self._retry_config = retry_config
        self._tracer = tracer or VaultTracer()
        self._event_poll_interval = event_poll_interval_seconds
        self._non_renewable_fraction = non_renewable_fraction

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._watcher: TokenLifetimeWatcher | None = None
        self._watcher_lock = threading.Lock()

        self._login_attempts = 0
        self._login_failures = 0
        self._renewals = 0
        self._relogins = 0
        self._unexpected_failures = 0
        self._last_login_error: str | None = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, initial_auth: ModelVaultAuthInfo | None = None) -> None:
        """Start the supervisor thread.

        Args:
            initial_auth: Token from a login already performed by the caller.
                When given, the first cycle watches it instead of logging in.
        """
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            args=(initial_auth,),
            name="vault_token_renewal_supervisor",
            daemon=True,
        )
        self._thread.start()
        logger.info("Vault token renewal supervisor started")

    def stop(self, timeout: float | None = 10.0) -> None:
        """Stop the supervisor and its active watcher, then join the thread."""
        self._stop_event.set()
        with self._watcher_lock:
            watcher = self._watcher
        if watcher is not None:
            watcher.stop(timeout)
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.info("Vault token renewal supervisor stopped")

    def describe(self) -> dict[str, object]:
        """Return non-sensitive supervisor state."""
        return {
            "running": self.is_running,
            "login_attempts": self._login_attempts,
            "login_failures": self._login_failures,
            "renewals": self._renewals,
            "relogins": self._relogins,
            "unexpected_failures": self._unexpected_failures,
            "last_login_error": self._last_login_error,
        }

    # -------------------------------------------------------------------------
    # Supervisor loop
    # -------------------------------------------------------------------------

    def _new_retry_state(self) -> ModelRetryState:
        return ModelRetryState(
            delay_seconds=self._retry_config.initial_backoff_seconds,
            backoff_multiplier=self._retry_config.exponential_base,
        )

    def _run(self, initial_auth: ModelVaultAuthInfo | None) -> None:
        auth = initial_auth
        retry_state = self._new_retry_state()

        while not self._stop_event.is_set():
            try:
                retry_state = self._run_cycle(auth, retry_state)
            except Exception:
                self._unexpected_failures += 1
                logger.exception("Vault token renewal cycle failed unexpectedly")
                self._stop_event.wait(self._retry_config.initial_backoff_seconds)
            auth = None

    def _run_cycle(
        self, auth: ModelVaultAuthInfo | None, retry_state: ModelRetryState
    ) -> ModelRetryState:
        """Log in when needed and watch the token until it must be replaced.

        Returns the retry state for the next cycle.
        """
        if auth is None:
            auth = self._login_once()
            if auth is None:
                retry_state = retry_state.next_attempt(
                    error_message=self._last_login_error or "login failed",
                    max_delay_seconds=self._retry_config.max_backoff_seconds,
                )
                logger.warning(
                    "Vault login failed, retrying",
                    extra={
                        "attempt": retry_state.attempt,
                        "backoff_seconds": retry_state.delay_seconds,
                        "last_error": retry_state.last_error,
                    },
                )
                self._stop_event.wait(retry_state.delay_seconds)
                return retry_state
            retry_state = self._new_retry_state()

        self._manage_token_lifecycle(auth)
        if not self._stop_event.is_set():
            self._relogins += 1
        return retry_state

    def _login_once(self) -> ModelVaultAuthInfo | None:
        """Run one traced login attempt. Returns None on failure."""
        self._login_attempts += 1
        with self._tracer.start_span(TRACE_COMPONENT, "token_login") as span:
            try:
                auth = self._login()
            except Exception as e:
                self._login_failures += 1
                self._last_login_error = sanitize_error_message(e)
                self._tracer.record_error_and_fail(
                    span, e, "unable to authenticate to Vault"
                )
                return None

        self._last_login_error = None
        logger.info(
            "Vault login succeeded",
            extra={
                "lease_duration": auth.lease_duration,
                "renewable": auth.renewable,
            },
        )
        return auth

    def _manage_token_lifecycle(self, auth: ModelVaultAuthInfo) -> None:
        """Watch one token until it must be replaced (or shutdown)."""
        if not auth.renewable:
            self._hold_non_renewable_token(auth)
            return

        try:
            watcher = self._watcher_factory(auth)
            watcher.start()
        except Exception as e:
            with self._tracer.start_span(TRACE_COMPONENT, "token_lifecycle") as span:
                self._tracer.record_error_and_fail(
                    span, e, "unable to start managing token lifecycle"
                )
            logger.warning(
                "Unable to start token lifetime watcher",
                extra={"error": sanitize_error_message(e)},
            )
            # Back off like a failed login so a broken factory cannot spin
            self._stop_event.wait(self._retry_config.initial_backoff_seconds)
            return

        with self._watcher_lock:
            self._watcher = watcher
        try:
            while not self._stop_event.is_set():
                event = self._next_event(watcher)
                if event is None:
                    return
                if self._handle_event(event):
                    return
        finally:
            watcher.stop()
            with self._watcher_lock:
                self._watcher = None

    def _next_event(
        self, watcher: TokenLifetimeWatcher
    ) -> ModelTokenLifecycleEvent | None:
        """Block until the watcher publishes an event or shutdown begins."""
        while not self._stop_event.is_set():
            try:
                return watcher.events.get(timeout=self._event_poll_interval)
            except queue.Empty:
                continue
        return None

    def _handle_event(self, event: ModelTokenLifecycleEvent) -> bool:
        """Trace one watcher event. Returns True when a re-login is needed."""
        with self._tracer.start_span(TRACE_COMPONENT, "token_lifecycle") as span:
            if event.event_type == EnumTokenLifecycleEventType.RENEWED:
                self._renewals += 1
                self._tracer.add_event(
                    span,
                    EnumTokenRenewalOutcome.RENEWED.value,
                    {
                        "message": "Successfully renewed token",
                        "lease_duration": event.lease_duration or 0,
                    },
                )
                logger.debug(
                    "Vault token renewed",
                    extra={"lease_duration": event.lease_duration},
                )
                return False

            if event.error is not None:
                safe_error = sanitize_error_message(event.error)
                self._tracer.add_event(
                    span,
                    EnumTokenRenewalOutcome.FAILED.value,
                    {
                        "message": (
                            f"Failed to renew token: {safe_error}. "
                            "Re-attempting login."
                        )
                    },
                )
                logger.warning(
                    "Vault token renewal failed, re-attempting login",
                    extra={"error": safe_error},
                )
            else:
                # A clean DONE still means the token is about to expire
                self._tracer.add_event(
                    span,
                    EnumTokenRenewalOutcome.EXPIRED.value,
                    {"message": "Token can no longer be renewed. Re-attempting login."},
                )
                logger.info("Vault token can no longer be renewed, re-attempting login")
            return True

    def _hold_non_renewable_token(self, auth: ModelVaultAuthInfo) -> None:
        with self._tracer.start_span(TRACE_COMPONENT, "token_lifecycle") as span:
            self._tracer.add_event(
                span,
                EnumTokenRenewalOutcome.NOT_RENEWABLE.value,
                {
                    "message": (
                        "Token is not configured to be renewable. "
                        "Re-attempting login."
                    ),
                    "lease_duration": auth.lease_duration,
                },
            )
        logger.warning(
            "Vault token is not renewable",
            extra={"lease_duration": auth.lease_duration},
        )
        if auth.lease_duration > 0:
            self._stop_event.wait(auth.lease_duration * self._non_renewable_fraction)
        else:
            # Zero lease: the token never expires, nothing to replace
            self._stop_event.wait()


__all__: list[str] = ["TokenRenewalSupervisor"]
