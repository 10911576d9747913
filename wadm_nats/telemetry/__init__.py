"""
OpenTelemetry Integration Module

Provides metrics and tracing for connection setup and resource provisioning:
- metrics: Counters and latency histograms
- tracer: Span creation around broker operations
"""

from .metrics import (
    setup_metrics,
    get_counter,
    get_histogram,
    increment_counter,
    record_latency,
)
from .tracer import setup_tracer, create_span

__all__ = [
    "setup_metrics",
    "get_counter",
    "get_histogram",
    "increment_counter",
    "record_latency",
    "setup_tracer",
    "create_span",
]
