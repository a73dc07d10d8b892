"""Tenant directory — watch-lists, destinations and plans per tenant.

The watch cycle only reads from the directory. ``MemoryTenantDirectory``
also implements the write side used at startup and by the API, with the
plan quota enforced on :meth:`MemoryTenantDirectory.add_address`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from sol_watch.errors.watch_errors import InvalidAddressError, QuotaExceededError
from sol_watch.ledger.address import normalize_address, validate_address
from sol_watch.tenants.plans import DEFAULT_PLAN, PlanTier

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sol_watch.config.settings import TenantConfig

logger = logging.getLogger(__name__)


class TenantDirectory(Protocol):
    """Read surface of the configuration collaborator."""

    async def list_tenants(self) -> list[str]: ...
    async def list_watched_addresses(self, tenant_id: str) -> list[str]: ...
    async def resolve_notification_destination(self, tenant_id: str) -> str | None: ...
    async def get_plan(self, tenant_id: str) -> PlanTier: ...


@dataclass
class TenantRecord:
    """Stored state of one tenant."""

    tenant_id: str
    plan: PlanTier = DEFAULT_PLAN
    destination: str | None = None
    addresses: list[str] = field(default_factory=list)


class MemoryTenantDirectory:
    """In-memory tenant directory."""

    def __init__(self) -> None:
        self._tenants: dict[str, TenantRecord] = {}

    @classmethod
    def from_config(cls, tenants: Iterable[TenantConfig]) -> MemoryTenantDirectory:
        """Seed a directory from configured tenants.

        Configured addresses bypass the plan quota and are all polled.
        """
        directory = cls()
        for cfg in tenants:
            record = directory.ensure_tenant(cfg.id)
            record.plan = cfg.plan
            record.destination = cfg.destination
            for address in cfg.addresses:
                if address not in record.addresses:
                    record.addresses.append(address)
        return directory

    def ensure_tenant(self, tenant_id: str) -> TenantRecord:
        """Return the tenant record, creating it on the FREE plan if missing."""
        record = self._tenants.get(tenant_id)
        if record is None:
            record = TenantRecord(tenant_id=tenant_id)
            self._tenants[tenant_id] = record
        return record

    # -- Read side --------------------------------------------------------

    async def list_tenants(self) -> list[str]:  # noqa: ASYNC910
        """Return all known tenant ids."""
        return list(self._tenants)

    async def list_watched_addresses(self, tenant_id: str) -> list[str]:  # noqa: ASYNC910
        """Return the tenant's watched addresses in insertion order."""
        record = self._tenants.get(tenant_id)
        return list(record.addresses) if record else []

    async def resolve_notification_destination(self, tenant_id: str) -> str | None:  # noqa: ASYNC910
        """Return the tenant's destination handle, if one is set."""
        record = self._tenants.get(tenant_id)
        return record.destination if record else None

    async def get_plan(self, tenant_id: str) -> PlanTier:  # noqa: ASYNC910
        """Return the tenant's plan (FREE for unknown tenants)."""
        record = self._tenants.get(tenant_id)
        return record.plan if record else DEFAULT_PLAN

    # -- Write side -------------------------------------------------------

    async def set_destination(self, tenant_id: str, destination: str | None) -> None:  # noqa: ASYNC910
        """Set or clear the tenant's notification destination."""
        self.ensure_tenant(tenant_id).destination = destination

    async def set_plan(self, tenant_id: str, plan: PlanTier) -> None:  # noqa: ASYNC910
        """Change the tenant's plan. Existing addresses are kept."""
        self.ensure_tenant(tenant_id).plan = plan

    async def add_address(self, tenant_id: str, address: str) -> bool:  # noqa: ASYNC910
        """Add *address* to the tenant's watch-list.

        Returns:
            True if the address was added, False if it was already watched.

        Raises:
            InvalidAddressError: The address is not a valid public key.
            QuotaExceededError: The plan's address limit is reached.
        """
        address = normalize_address(address)
        if not validate_address(address):
            raise InvalidAddressError(address)
        record = self.ensure_tenant(tenant_id)
        if address in record.addresses:
            return False
        limit = record.plan.max_addresses
        if len(record.addresses) >= limit:
            raise QuotaExceededError(tenant_id, record.plan.value, limit)
        record.addresses.append(address)
        logger.info("Tenant %s now watches %s", tenant_id, address)
        return True

    async def remove_address(self, tenant_id: str, address: str) -> bool:  # noqa: ASYNC910
        """Remove *address* from the watch-list; returns whether it was present."""
        record = self._tenants.get(tenant_id)
        address = normalize_address(address)
        if record is None or address not in record.addresses:
            return False
        record.addresses.remove(address)
        logger.info("Tenant %s stopped watching %s", tenant_id, address)
        return True
