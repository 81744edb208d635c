"""Observability module for OpenTelemetry-aligned tracing, metrics, and logging."""

from catalog_search.observability.context import (
    bind_index_type,
    get_trace_context,
    set_trace_context,
    trace_context,
)
from catalog_search.observability.logging import JsonFormatter, configure_logging
from catalog_search.observability.metrics import (
    INDEX_BUILDS,
    INDEX_DOC_COUNT,
    OPERATION_LATENCY,
    QUERY_COUNT,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from catalog_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "INDEX_BUILDS",
    "INDEX_DOC_COUNT",
    "OPERATION_LATENCY",
    "QUERY_COUNT",
    "JsonFormatter",
    "bind_index_type",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
