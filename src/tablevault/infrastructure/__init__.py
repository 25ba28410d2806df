"""Infrastructure layer - cross-cutting concerns."""

from tablevault.infrastructure.config import Config, get_config
from tablevault.infrastructure.logging import setup_logging, get_logger
from tablevault.infrastructure.metrics import MetricsRegistry, get_metrics
from tablevault.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "MetricsRegistry",
    "get_metrics",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
