"""Prometheus metrics for the kube-tagger operator."""

from __future__ import annotations

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram


class TaggerMetrics:
    """Counters for one operator process, registered on a single registry.

    The process owns one instance bound to the default registry; tests build
    their own with a private ``CollectorRegistry``.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self.registry = registry

        # Reconciliation metrics
        self.events_processed = Counter(
            "kubetagger_processed_events_total",
            "The total number of processed events",
            registry=registry,
        )
        self.tags_added = Counter(
            "kubetagger_volume_tags_added",
            "Number of tags added to volumes by kube-tagger",
            registry=registry,
        )
        self.tags_existing = Counter(
            "kubetagger_volume_tags_existing",
            "Number of tags already existing on volumes",
            registry=registry,
        )
        self.volumes_tagged = Counter(
            "kubetagger_volumes_tagged",
            "Number of volumes tagged by kube-tagger",
            registry=registry,
        )
        self.processing_errors = Counter(
            "kubetagger_errors",
            "Number of errors while processing",
            registry=registry,
        )

        # API call metrics
        self.api_call_total = Counter(
            "kubetagger_api_call_total",
            "Total number of API calls",
            ["api_type", "operation", "result"],
            registry=registry,
        )
        self.api_call_duration_seconds = Histogram(
            "kubetagger_api_call_duration_seconds",
            "Duration of API calls in seconds",
            ["api_type", "operation"],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
            registry=registry,
        )

    def record_api_call(self, api_type: str, operation: str, result: str, duration: float) -> None:
        """Count one API call and observe its duration."""
        self.api_call_total.labels(api_type=api_type, operation=operation, result=result).inc()
        self.api_call_duration_seconds.labels(api_type=api_type, operation=operation).observe(duration)
