"""
Defines Prometheus metrics for page fetching and extraction.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Gauge as _OrigGauge
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test reloads, multiple app instances) must not
# register the same collector twice.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Gauge = _duplicate_safe_factory(_OrigGauge)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "extractions_total": Counter(
            "pageclip_extractions_total",
            "Total number of extraction calls by outcome",
            ["outcome"],
        ),
        "extraction_duration_seconds": Histogram(
            "pageclip_extraction_duration_seconds",
            "Time taken to fetch, parse and extract a page",
            buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
        ),
        "fetch_latency_seconds": Histogram(
            "pageclip_fetch_latency_seconds",
            "Time taken to fetch a URL including retries",
            buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
        ),
        "fetch_responses_total": Counter(
            "pageclip_fetch_responses_total",
            "Total number of HTTP responses by status class",
            ["status_class"],
        ),
        "fetch_in_flight_requests": Gauge(
            "pageclip_fetch_in_flight_requests",
            "Number of HTTP requests currently in flight",
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


def export_prometheus() -> bytes:
    """Export the default registry in Prometheus text format."""
    from prometheus_client import generate_latest

    return generate_latest()
