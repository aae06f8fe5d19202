# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Retry state model for exponential backoff loops."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelRetryState(BaseModel):
    """Immutable retry bookkeeping.

    ``attempt`` counts failures so far. ``delay_seconds`` is the wait before
    the next attempt. There is no attempt limit; the renewal supervisor
    retries until it is stopped.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    attempt: int = Field(default=0, ge=0)
    delay_seconds: float = Field(default=1.0, ge=0.0)
    backoff_multiplier: float = Field(default=2.0, ge=1.0)
    last_error: str | None = None

    def next_attempt(
        self,
        error_message: str,
        max_delay_seconds: float,
    ) -> ModelRetryState:
        """Record a failure and return the state for the next attempt.

        The first failure waits ``delay_seconds``; every later failure
        multiplies the previous delay, capped at ``max_delay_seconds``.
        """
        delay = self.delay_seconds
        if self.attempt > 0:
            delay = self.delay_seconds * self.backoff_multiplier
        return self.model_copy(
            update={
                "attempt": self.attempt + 1,
                "delay_seconds": min(delay, max_delay_seconds),
                "last_error": error_message,
            }
        )


__all__: list[str] = ["ModelRetryState"]
