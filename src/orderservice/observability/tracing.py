"""
OpenTelemetry detection.

OpenTelemetry is optional (``pip install orderservice[telemetry]``). This is
the only module that tries to import it; everything else asks
``OTEL_AVAILABLE`` or goes through ``get_tracer``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

try:
    from opentelemetry import trace

    OTEL_AVAILABLE = True
except ImportError:
    OTEL_AVAILABLE = False
    trace = None  # type: ignore[assignment]


def get_tracer(name: str) -> Tracer | None:
    """Return ``trace.get_tracer(name)``, or None without OpenTelemetry."""
    if not OTEL_AVAILABLE or trace is None:
        return None
    return trace.get_tracer(name)


def should_trace(enable_tracing: bool) -> bool:
    """True when a component asked for tracing and OpenTelemetry is importable."""
    return enable_tracing and OTEL_AVAILABLE


__all__ = [
    "OTEL_AVAILABLE",
    "get_tracer",
    "should_trace",
]
