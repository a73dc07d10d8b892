"""Tests for notification rendering, dispatch and delivery."""
