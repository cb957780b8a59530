"""Observability utilities for condense."""

from condense.core.observability.metrics import (
    Metric,
    MetricsCollector,
    MetricType,
    get_metrics,
)

__all__ = [
    "Metric",
    "MetricsCollector",
    "MetricType",
    "get_metrics",
]
