"""Tenants — plan tiers and the watch-list directory."""

from __future__ import annotations

from sol_watch.tenants.directory import MemoryTenantDirectory, TenantDirectory, TenantRecord
from sol_watch.tenants.plans import DEFAULT_PLAN, PlanTier

__all__ = [
    "DEFAULT_PLAN",
    "MemoryTenantDirectory",
    "PlanTier",
    "TenantDirectory",
    "TenantRecord",
]
