"""Metrics for the summarization pipeline.

Every metric is a log record on ``condense.core.observability.metrics.metrics``
with the metric dict attached as ``extra``, so any log shipper can pick
them up. The ``record_*`` helpers name the pipeline's own metrics:

    summarization.jobs             counter, labels: method
    summarization.chunks           counter, labels: level
    summarization.iteration_ms     timer, labels: iteration, level
    summarization.validation_ms    timer
    summarization.quality_score    histogram, labels: passed
    summarization.quality_retries  counter, labels: retry
    summarization.quality_critical counter
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union

logger = logging.getLogger(__name__)


class MetricType(Enum):
    """Types of metrics that can be emitted."""

    COUNTER = "counter"
    HISTOGRAM = "histogram"
    TIMER = "timer"


@dataclass
class Metric:
    """A single metric observation."""

    name: str
    value: Union[int, float]
    metric_type: MetricType
    labels: Dict[str, str] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "type": self.metric_type.value,
            "labels": self.labels,
            "timestamp": self.timestamp,
        }


class MetricsCollector:
    """Emits metrics as structured log records."""

    def __init__(self, prefix: str = "condense"):
        self.prefix = prefix
        self._logger = logging.getLogger(f"{__name__}.metrics")

    def emit(self, metric: Metric) -> None:
        self._logger.info(f"METRIC: {self.prefix}.{metric.name}", extra={"metric": metric.to_dict()})

    def counter(self, name: str, value: int = 1, labels: Optional[Dict[str, str]] = None) -> None:
        self.emit(Metric(name=name, value=value, metric_type=MetricType.COUNTER, labels=labels or {}))

    def timer(self, name: str, duration_ms: float, labels: Optional[Dict[str, str]] = None) -> None:
        """Emit a timer metric (duration in milliseconds)."""
        self.emit(Metric(name=name, value=duration_ms, metric_type=MetricType.TIMER, labels=labels or {}))

    def histogram(
        self,
        name: str,
        value: Union[int, float],
        labels: Optional[Dict[str, str]] = None,
    ) -> None:
        self.emit(Metric(name=name, value=value, metric_type=MetricType.HISTOGRAM, labels=labels or {}))

    @contextmanager
    def timed(self, name: str, labels: Optional[Dict[str, str]] = None) -> Iterator[None]:
        """Time the enclosed block and emit it as a timer, even on error."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.timer(name, (time.perf_counter() - start) * 1000, labels)

    # -- pipeline metrics -------------------------------------------------

    def record_job(self, method: str) -> None:
        """Count a completed job by processing method (full_text/hierarchical)."""
        self.counter("summarization.jobs", labels={"method": method})

    def record_iteration(self, iteration: int, level: str, chunk_count: int, duration_ms: float) -> None:
        """Record one compression pass: chunks sent and wall time."""
        self.counter("summarization.chunks", chunk_count, labels={"level": level})
        self.timer(
            "summarization.iteration_ms",
            duration_ms,
            labels={"iteration": str(iteration), "level": level},
        )

    def record_quality_score(self, score: float, passed: bool) -> None:
        self.histogram(
            "summarization.quality_score", score, labels={"passed": str(passed).lower()}
        )

    def record_quality_retry(self, retry_number: int) -> None:
        self.counter("summarization.quality_retries", labels={"retry": str(retry_number)})

    def record_quality_critical(self) -> None:
        self.counter("summarization.quality_critical")


# Global metrics collector
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get the global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
