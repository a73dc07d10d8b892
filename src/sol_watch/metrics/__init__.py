"""Prometheus metrics for the watch cycle."""

from __future__ import annotations

from sol_watch.metrics.collector import MetricsCollector, WatcherMetrics

__all__ = ["MetricsCollector", "WatcherMetrics"]
