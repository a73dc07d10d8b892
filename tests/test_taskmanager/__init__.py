"""Tests for the TaskManager."""
