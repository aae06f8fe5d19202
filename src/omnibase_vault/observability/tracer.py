# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""OpenTelemetry tracing facade for omnibase_vault.

VaultTracer is a thin wrapper over an OpenTelemetry tracer exposing the
four calls the renewal supervisor needs:

    - start_span(component, operation): context manager, ends the span on exit
    - add_event(span, name, attributes)
    - record_error_and_fail(span, error, message)
    - the span's own end(), called by start_span

Only ``opentelemetry-api`` is required. Without an SDK TracerProvider
installed, the global tracer hands out non-recording spans and every call
here is a no-op.

Security:
    Event attributes and error messages are passed through
    sanitize_error_string so tokens and secret IDs never reach an exporter.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from omnibase_vault.utils.util_error_sanitization import (
    sanitize_error_message,
    sanitize_error_string,
)

logger = logging.getLogger(__name__)

INSTRUMENTING_MODULE_NAME: str = "omnibase_vault"

type SpanAttributeValue = str | bool | int | float


class VaultTracer:
    """Span helper bound to one OpenTelemetry tracer.

    Example:
        >>> tracer = VaultTracer()
        >>> with tracer.start_span("vault", "token_login") as span:
        ...     tracer.add_event(span, "token_renewed", {"lease_duration": 3600})
    """

    def __init__(self, tracer: trace.Tracer | None = None) -> None:
        """Initialize the tracer facade.

        Args:
            tracer: OpenTelemetry tracer to use. Defaults to the tracer from
                the globally configured TracerProvider.
        """
        self._tracer = tracer or trace.get_tracer(INSTRUMENTING_MODULE_NAME)

    @contextmanager
    def start_span(
        self,
        component: str,
        operation: str,
        parent_context: Context | None = None,
        attributes: Mapping[str, SpanAttributeValue] | None = None,
    ) -> Iterator[Span]:
        """Open a span named ``"{component}.{operation}"`` and end it on exit.

        An exception escaping the block is recorded on the span, which is
        marked failed, and the exception is re-raised.

        Args:
            component: Component name (e.g. "vault")
            operation: Operation name (e.g. "token_login")
            parent_context: Optional parent trace context
            attributes: Optional span attributes

        Yields:
            The active span
        """
        span = self._tracer.start_span(
            name=f"{component}.{operation}",
            context=parent_context,
            kind=SpanKind.INTERNAL,
            attributes={"component": component, **(attributes or {})},
        )
        try:
            with trace.use_span(
                span,
                end_on_exit=False,
                record_exception=False,
                set_status_on_exception=False,
            ):
                yield span
        except Exception as e:
            self.record_error_and_fail(span, e, f"{operation} failed")
            raise
        finally:
            span.end()

    def add_event(
        self,
        span: Span,
        name: str,
        attributes: Mapping[str, SpanAttributeValue] | None = None,
    ) -> None:
        """Attach a named event with sanitized attributes to ``span``."""
        safe_attributes: dict[str, SpanAttributeValue] = {}
        for key, value in (attributes or {}).items():
            if isinstance(value, str):
                safe_attributes[key] = sanitize_error_string(value)
            else:
                safe_attributes[key] = value
        span.add_event(name, attributes=safe_attributes)

    def record_error_and_fail(
        self,
        span: Span,
        error: BaseException,
        message: str,
    ) -> None:
        """Record ``error`` on ``span`` and set the span status to ERROR.

        The exception is recorded by type and sanitized message only;
        exception objects can carry request details we do not export.
        """
        safe_error = sanitize_error_message(error)
        span.add_event(
            "exception",
            attributes={
                "exception.type": type(error).__name__,
                "exception.message": safe_error,
            },
        )
        span.set_status(Status(StatusCode.ERROR, f"{message}: {safe_error}"))
        logger.debug(
            "Span marked failed",
            extra={"span_message": message, "error_type": type(error).__name__},
        )


__all__: list[str] = ["VaultTracer"]
