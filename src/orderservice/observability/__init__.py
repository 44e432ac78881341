"""
Observability utilities for orderservice.

Provides composition-based tracing and the standard span attribute names
used by the stores and the order service.

Example:
    >>> from orderservice.observability import create_tracer, MockTracer
    >>>
    >>> class MyStore:
    ...     def __init__(self, enable_tracing: bool = True):
    ...         self._tracer = create_tracer(__name__, enable_tracing)
    ...         self._enable_tracing = self._tracer.enabled

Note:
    OpenTelemetry is an optional dependency. Without it every tracer created
    through ``create_tracer`` is a NullTracer.
"""

from orderservice.observability.attributes import (
    ATTR_ACCOUNT_ID,
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_ITEM_COUNT,
    ATTR_ORDER_ID,
    ATTR_ORDER_STATUS,
    ATTR_RESULT_COUNT,
)
from orderservice.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    RecordedSpan,
    Tracer,
    create_tracer,
)
from orderservice.observability.tracing import OTEL_AVAILABLE, get_tracer, should_trace

__all__ = [
    # Availability
    "OTEL_AVAILABLE",
    "get_tracer",
    "should_trace",
    # Tracers
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "RecordedSpan",
    "create_tracer",
    # Attributes
    "ATTR_ORDER_ID",
    "ATTR_ACCOUNT_ID",
    "ATTR_ORDER_STATUS",
    "ATTR_ITEM_COUNT",
    "ATTR_RESULT_COUNT",
    "ATTR_DB_SYSTEM",
    "ATTR_DB_OPERATION",
]
