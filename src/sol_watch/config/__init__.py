"""Configuration — pydantic-settings models for environment and YAML."""

from __future__ import annotations

from sol_watch.config.settings import AppConfig

__all__ = ["AppConfig"]
