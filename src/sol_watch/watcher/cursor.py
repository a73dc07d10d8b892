"""Cursor store — last reported signature per (tenant, address).

The store is the source of truth for "what has already been reported".
Backends implement :class:`CursorStore`; :class:`MemoryCursorStore` keeps
state for the lifetime of the process only, so a restart re-seeds every
target and silently skips whatever happened while the process was down.

Next to each signature the store keeps the slot it landed in, so a window
served by a lagging RPC node can be told apart from genuinely new activity.
"""

from __future__ import annotations

from typing import Protocol


class CursorStore(Protocol):
    """Protocol for cursor backends."""

    async def get(self, tenant_id: str, address: str) -> str | None: ...
    async def get_slot(self, tenant_id: str, address: str) -> int | None: ...
    async def set(self, tenant_id: str, address: str, signature: str, *, slot: int | None = None) -> None: ...
    async def delete(self, tenant_id: str, address: str) -> None: ...
    async def snapshot(self) -> dict[str, dict[str, str]]: ...


class MemoryCursorStore:
    """In-memory cursor map: tenant id → address → last signature.

    Each write replaces a single key, so a cursor is never partially
    updated even when cycles overlap. There is no eviction; the key space
    is bounded by plan quotas.
    """

    def __init__(self) -> None:
        self._cursors: dict[str, dict[str, str]] = {}
        self._slots: dict[tuple[str, str], int] = {}

    async def get(self, tenant_id: str, address: str) -> str | None:  # noqa: ASYNC910
        """Return the stored cursor, or None if the target was never observed."""
        return self._cursors.get(tenant_id, {}).get(address)

    async def get_slot(self, tenant_id: str, address: str) -> int | None:  # noqa: ASYNC910
        """Return the slot of the stored cursor, if it was recorded."""
        return self._slots.get((tenant_id, address))

    async def set(  # noqa: ASYNC910
        self,
        tenant_id: str,
        address: str,
        signature: str,
        *,
        slot: int | None = None,
    ) -> None:
        """Store *signature* (and the slot it landed in) as the cursor for the target."""
        self._cursors.setdefault(tenant_id, {})[address] = signature
        if slot:
            self._slots[(tenant_id, address)] = slot
        else:
            self._slots.pop((tenant_id, address), None)

    async def delete(self, tenant_id: str, address: str) -> None:  # noqa: ASYNC910
        """Forget the cursor for a target (no-op if absent)."""
        self._slots.pop((tenant_id, address), None)
        tenant = self._cursors.get(tenant_id)
        if tenant is None:
            return
        tenant.pop(address, None)
        if not tenant:
            del self._cursors[tenant_id]

    async def snapshot(self) -> dict[str, dict[str, str]]:  # noqa: ASYNC910
        """Return a copy of all cursors."""
        return {tenant: dict(addresses) for tenant, addresses in self._cursors.items()}

    def __len__(self) -> int:
        return sum(len(addresses) for addresses in self._cursors.values())
