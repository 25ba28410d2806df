"""Prometheus metrics for the table store."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all table store metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Mutation queue metrics
        self.mutations_total = Counter(
            "tablevault_mutations_total",
            "Total number of drained mutations",
            ["kind", "status"],  # status: success, error
            registry=self._registry,
        )

        self.drain_step_latency_seconds = Histogram(
            "tablevault_drain_step_latency_seconds",
            "Latency of one reload-apply-persist cycle",
            ["kind"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

        self.queue_depth = Gauge(
            "tablevault_queue_depth",
            "Number of mutations waiting in the queue",
            registry=self._registry,
        )

        # Durable file metrics
        self.reloads_total = Counter(
            "tablevault_reloads_total",
            "Total snapshot reloads from disk",
            registry=self._registry,
        )

        self.persists_total = Counter(
            "tablevault_persists_total",
            "Total snapshot writes to disk",
            registry=self._registry,
        )

        self.snapshot_bytes = Gauge(
            "tablevault_snapshot_bytes",
            "Size of the last written snapshot in bytes",
            registry=self._registry,
        )

        self.decode_failures_total = Counter(
            "tablevault_decode_failures_total",
            "Snapshots that failed to decode",
            ["reason"],  # framing, magic, cipher, encoding, payload
            registry=self._registry,
        )

        # Migration metrics
        self.migrations_applied_total = Counter(
            "tablevault_migrations_applied_total",
            "Total migrations applied",
            registry=self._registry,
        )

        self.migrations_skipped_total = Counter(
            "tablevault_migrations_skipped_total",
            "Migrations skipped because their id was already applied",
            registry=self._registry,
        )

        self.info = Info(
            "tablevault",
            "Table store information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The collector registry the metrics are registered on."""
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up the Prometheus metrics endpoint for a host process.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from tablevault import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
