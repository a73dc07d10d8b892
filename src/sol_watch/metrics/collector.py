"""Prometheus metrics for the watcher.

Exposed series (namespace ``solwatch``):
- ``solwatch_cycle_histogram``: duration of a full watch cycle
- ``solwatch_targets_total{outcome}``: polled / seeded / empty / skipped / stale / rate_limited / failed
- ``solwatch_notifications_total{result}``: sent / dropped
- ``solwatch_cursors_gauge``: number of stored cursors
- ``solwatch_cron_histogram{job_name}`` and ``solwatch_cron_last_execution_gauge{job_name}``
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

if TYPE_CHECKING:
    from collections.abc import Iterator

NAMESPACE = "solwatch"


class MetricsCollector:
    """Factory for metrics bound to one registry and namespace.

    Every :class:`WatcherMetrics` gets a private registry unless one is
    passed in, so several apps can live in one process.
    """

    def __init__(self, registry: CollectorRegistry | None = None, *, namespace: str = NAMESPACE) -> None:
        self._registry = registry or CollectorRegistry()
        self._namespace = namespace

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def gauge(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Gauge:
        return Gauge(name, doc, labels, namespace=self._namespace, registry=self._registry)

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        return Histogram(name, doc, labels, namespace=self._namespace, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        return Counter(name, doc, labels, namespace=self._namespace, registry=self._registry)


class WatcherMetrics:
    """Watch cycle, target, notification and scheduler metrics."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._cycle = self._collector.histogram("cycle_histogram", "Duration of full watch cycles")
        self._targets = self._collector.counter(
            "targets",
            "Watch targets processed, by outcome",
            ("outcome",),
        )
        self._notifications = self._collector.counter(
            "notifications",
            "Transfer notifications, by delivery result",
            ("result",),
        )
        self._cursors = self._collector.gauge("cursors_gauge", "Number of stored watch cursors")
        self._cron = self._collector.histogram(
            "cron_histogram",
            "Duration of scheduled job runs",
            ("job_name",),
        )
        self._cron_last = self._collector.gauge(
            "cron_last_execution_gauge",
            "Unix time of the last scheduled job run",
            ("job_name",),
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Registry served by the ``/metrics`` endpoint."""
        return self._collector.registry

    def record_target(self, outcome: str) -> None:
        self._targets.labels(outcome=outcome).inc()

    def record_notification(self, *, delivered: bool) -> None:
        self._notifications.labels(result="sent" if delivered else "dropped").inc()

    def set_cursor_count(self, count: int) -> None:
        self._cursors.set(count)

    @contextmanager
    def track_cycle(self) -> Iterator[None]:
        """Observe the duration of the enclosed watch cycle, even if it raises."""
        with self._cycle.time():
            yield

    @contextmanager
    def track_cron(self, job_name: str) -> Iterator[None]:
        """Observe a scheduled job run and stamp its last execution time."""
        self._cron_last.labels(job_name=job_name).set(time.time())
        with self._cron.labels(job_name=job_name).time():
            yield
