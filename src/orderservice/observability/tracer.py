"""
Tracers handed to stores and the order service.

Components never import OpenTelemetry themselves. They take a ``Tracer`` in
their constructor (or build one with ``create_tracer``) and wrap each
operation in ``tracer.span(...)``. Three implementations exist:

- NullTracer: spans are no-ops; used when tracing is off or OTEL is missing
- OpenTelemetryTracer: spans go to the globally configured OTEL provider
- MockTracer: spans are recorded in memory for test assertions

Example:
    >>> class AuditedStore:
    ...     def __init__(self, tracer: Tracer | None = None, enable_tracing: bool = True):
    ...         self._tracer = tracer or create_tracer(__name__, enable_tracing)
    ...
    ...     async def save(self, order: Order) -> Order:
    ...         with self._tracer.span("audited_store.save", {ATTR_ORDER_ID: order.id}):
    ...             return await self._write(order)
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, NamedTuple, Protocol, runtime_checkable

from orderservice.observability.tracing import OTEL_AVAILABLE, get_tracer

if TYPE_CHECKING:
    from opentelemetry.trace import Span

SpanAttributes = dict[str, Any]


@runtime_checkable
class Tracer(Protocol):
    """Anything that can open a span around a block of code."""

    def span(
        self,
        name: str,
        attributes: SpanAttributes | None = None,
    ) -> AbstractContextManager[Span | None]:
        """
        Open a span named ``name`` for the duration of a ``with`` block.

        The context manager yields the live span, or None when the tracer
        does not produce real spans. Callers must check before using it.
        """
        ...

    @property
    def enabled(self) -> bool:
        """True when spans are actually produced."""
        ...


class NullTracer:
    """Tracer whose spans do nothing."""

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: SpanAttributes | None = None,
    ) -> Iterator[None]:
        yield None

    @property
    def enabled(self) -> bool:
        return False


class OpenTelemetryTracer:
    """
    Tracer backed by ``opentelemetry.trace``.

    Args:
        tracer_name: Instrumentation scope name, usually the module ``__name__``

    Raises:
        ImportError: If opentelemetry-api is not installed
    """

    def __init__(self, tracer_name: str) -> None:
        otel_tracer = get_tracer(tracer_name)
        if otel_tracer is None:
            raise ImportError(
                "opentelemetry-api is required for OpenTelemetryTracer; "
                "install orderservice[telemetry]"
            )
        self._otel_tracer = otel_tracer

    def span(
        self,
        name: str,
        attributes: SpanAttributes | None = None,
    ) -> AbstractContextManager[Span | None]:
        return self._otel_tracer.start_as_current_span(name, attributes=attributes or {})

    @property
    def enabled(self) -> bool:
        return True


class RecordedSpan(NamedTuple):
    """One span captured by MockTracer. Compares equal to a plain tuple."""

    name: str
    attributes: SpanAttributes | None


class MockTracer:
    """
    Tracer that records every span it opens.

    Reports itself as enabled so components compute their span attributes
    exactly as they would in production.

    Example:
        >>> tracer = MockTracer()
        >>> service = OrderService(InMemoryOrderStore(), tracer=tracer)
        >>> await service.get_orders_by_account_id("acc-1")
        >>> tracer.span_names
        ['orderservice.service.get_orders_by_account_id']
    """

    def __init__(self) -> None:
        self.spans: list[RecordedSpan] = []

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: SpanAttributes | None = None,
    ) -> Iterator[None]:
        self.spans.append(RecordedSpan(name, attributes))
        yield None

    @property
    def enabled(self) -> bool:
        return True

    @property
    def span_names(self) -> list[str]:
        return [span.name for span in self.spans]

    def clear(self) -> None:
        self.spans.clear()


def create_tracer(name: str, enable_tracing: bool = True) -> Tracer:
    """
    Pick the tracer a component should use.

    Returns an OpenTelemetryTracer when ``enable_tracing`` is set and
    OpenTelemetry can be imported, a NullTracer otherwise.
    """
    if enable_tracing and OTEL_AVAILABLE:
        return OpenTelemetryTracer(name)
    return NullTracer()


__all__ = [
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "RecordedSpan",
    "create_tracer",
]
