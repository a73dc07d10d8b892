"""Tests for Prometheus watcher metrics."""
