"""Watch cycle orchestrator — one sweep over every tenant and watched address.

A sweep walks tenants and their addresses sequentially. Per target:

1. list the most recent signatures (FETCHING)
2. diff them against the stored cursor (DIFFING)
3. fetch each unseen transaction, oldest first (DETAILING)
4. extract the transfer and dispatch it (NOTIFYING)
5. advance the cursor to the newest listed signature (ADVANCING_CURSOR)

Failures stay contained to one target in one cycle. A rate-limited target
pauses the whole sweep for ``rate_limit_pause`` seconds and is retried on
the next cycle; any other error skips the target. In both cases the cursor
is left as it was.

A window whose newest slot is older than the stored cursor comes from a
lagging RPC node; it is ignored and the cursor never moves backwards.
Plan quotas are enforced when addresses are added, not here: every
watched address is polled.
"""

from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sol_watch.errors.ledger_errors import LedgerError, RateLimitedError
from sol_watch.ledger.address import validate_address
from sol_watch.watcher.diff import compute_diff
from sol_watch.watcher.transfer import extract_transfer

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sol_watch.config.settings import WatcherConfig
    from sol_watch.ledger import LedgerClient
    from sol_watch.metrics.collector import WatcherMetrics
    from sol_watch.notifications.dispatcher import NotificationDispatcher
    from sol_watch.tenants.directory import TenantDirectory
    from sol_watch.watcher.cursor import CursorStore

logger = logging.getLogger(__name__)


class CycleState(enum.StrEnum):
    """Where the orchestrator currently is within a sweep."""

    IDLE = "idle"
    ENUMERATING_TENANTS = "enumerating_tenants"
    ENUMERATING_TARGETS = "enumerating_targets"
    FETCHING = "fetching"
    DIFFING = "diffing"
    DETAILING = "detailing"
    NOTIFYING = "notifying"
    ADVANCING_CURSOR = "advancing_cursor"


class TargetOutcome(enum.StrEnum):
    """Result of polling a single watch target."""

    POLLED = "polled"
    SEEDED = "seeded"
    EMPTY = "empty"
    SKIPPED = "skipped"
    STALE = "stale"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"


@dataclass
class CycleReport:
    """Counters gathered during one sweep."""

    tenants: int = 0
    polled: int = 0
    seeded: int = 0
    empty: int = 0
    skipped: int = 0
    stale: int = 0
    rate_limited: int = 0
    failed: int = 0
    events: int = 0
    notified: int = 0

    def record(self, outcome: TargetOutcome) -> None:
        """Increment the counter matching *outcome*."""
        name = outcome.value
        setattr(self, name, getattr(self, name) + 1)


class WatchCycle:
    """Drives ledger polling, diffing, extraction and dispatch.

    Usage::

        cycle = WatchCycle(rpc, directory, MemoryCursorStore(), dispatcher, config.watcher)
        report = await cycle.run_watch_cycle()
    """

    def __init__(
        self,
        ledger: LedgerClient,
        directory: TenantDirectory,
        cursors: CursorStore,
        dispatcher: NotificationDispatcher,
        config: WatcherConfig,
        *,
        metrics: WatcherMetrics | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._ledger = ledger
        self._directory = directory
        self._cursors = cursors
        self._dispatcher = dispatcher
        self._config = config
        self._metrics = metrics
        self._sleep = sleep
        self._state = CycleState.IDLE
        self._lock = asyncio.Lock()

    @property
    def state(self) -> CycleState:
        """Current position within the sweep."""
        return self._state

    @property
    def cursors(self) -> CursorStore:
        """The cursor store this cycle advances."""
        return self._cursors

    async def run_watch_cycle(self) -> CycleReport:
        """Run one full sweep over every tenant and watched address.

        Overlapping calls are serialized. Per-target failures are logged
        and counted, never raised.
        """
        async with self._lock:
            report = CycleReport()
            tracker = self._metrics.track_cycle() if self._metrics else contextlib.nullcontext()
            try:
                with tracker:
                    await self._sweep(report)
            finally:
                self._state = CycleState.IDLE
            await self._update_cursor_gauge()
            logger.info(
                "Watch cycle done: %d tenants, %d polled, %d seeded, %d rate limited, "
                "%d failed, %d events, %d notified",
                report.tenants,
                report.polled,
                report.seeded,
                report.rate_limited,
                report.failed,
                report.events,
                report.notified,
            )
            return report

    async def prime_target(self, tenant_id: str, address: str) -> str | None:
        """Seed the cursor of a freshly added address.

        Everything that happened before this call is ignored. Ledger
        errors propagate to the caller.

        Returns:
            The seeded signature, or None if the address has no history yet.
        """
        if not validate_address(address):
            return None
        signatures = await self._ledger.get_signatures_for_address(address, 1)
        if not signatures:
            return None
        newest = signatures[0].signature
        await self._cursors.set(tenant_id, address, newest, slot=signatures[0].slot)
        logger.debug("Primed %s/%s at %s", tenant_id, address, newest)
        return newest

    async def forget_target(self, tenant_id: str, address: str) -> None:
        """Drop the cursor of an address that is no longer watched.

        Waits for a running sweep, which could otherwise write the cursor
        back after it was dropped.
        """
        async with self._lock:
            await self._cursors.delete(tenant_id, address)

    # ------------------------------------------------------------------
    # Sweep
    # ------------------------------------------------------------------

    async def _sweep(self, report: CycleReport) -> None:
        self._state = CycleState.ENUMERATING_TENANTS
        try:
            tenants = await self._directory.list_tenants()
        except Exception:
            logger.exception("Failed to enumerate tenants")
            return

        for tenant_id in tenants:
            report.tenants += 1
            await self._sweep_tenant(tenant_id, report)

    async def _sweep_tenant(self, tenant_id: str, report: CycleReport) -> None:
        self._state = CycleState.ENUMERATING_TARGETS
        try:
            addresses = await self._directory.list_watched_addresses(tenant_id)
        except Exception:
            logger.exception("Failed to load watch-list of tenant %s", tenant_id)
            return

        for address in addresses:
            outcome = await self.poll_target(tenant_id, address, report)
            report.record(outcome)
            if self._metrics:
                self._metrics.record_target(outcome.value)

    async def poll_target(
        self,
        tenant_id: str,
        address: str,
        report: CycleReport | None = None,
    ) -> TargetOutcome:
        """Poll one watch target and dispatch its new transfers."""
        if not validate_address(address):
            logger.debug("Skipping malformed address %r of tenant %s", address, tenant_id)
            return TargetOutcome.SKIPPED

        try:
            return await self._poll(tenant_id, address, report or CycleReport())
        except RateLimitedError:
            logger.warning(
                "Rate limited while polling %s/%s, pausing %.1fs",
                tenant_id,
                address,
                self._config.rate_limit_pause,
            )
            await self._sleep(self._config.rate_limit_pause)
            return TargetOutcome.RATE_LIMITED
        except LedgerError as exc:
            logger.error("Watcher error for %s/%s: %s", tenant_id, address, exc)
            return TargetOutcome.FAILED
        except Exception:
            logger.exception("Unexpected watcher error for %s/%s", tenant_id, address)
            return TargetOutcome.FAILED

    async def _poll(self, tenant_id: str, address: str, report: CycleReport) -> TargetOutcome:
        self._state = CycleState.FETCHING
        signatures = await self._ledger.get_signatures_for_address(
            address, self._config.signature_limit
        )

        self._state = CycleState.DIFFING
        cursor = await self._cursors.get(tenant_id, address)
        cursor_slot = await self._cursors.get_slot(tenant_id, address)
        diff = compute_diff(signatures, cursor, cursor_slot)
        if diff.stale:
            logger.info(
                "Signature window of %s/%s predates cursor slot %d; keeping cursor",
                tenant_id,
                address,
                cursor_slot,
            )
            return TargetOutcome.STALE
        if diff.cursor is None:
            return TargetOutcome.EMPTY
        if diff.seeded:
            await self._cursors.set(tenant_id, address, diff.cursor, slot=diff.cursor_slot)
            logger.debug("Seeded cursor for %s/%s at %s", tenant_id, address, diff.cursor)
            return TargetOutcome.SEEDED
        if diff.overflow:
            logger.info(
                "Cursor of %s/%s fell out of the %d-signature window; older activity is skipped",
                tenant_id,
                address,
                self._config.signature_limit,
            )

        for sig in diff.new:
            self._state = CycleState.DETAILING
            detail = await self._ledger.get_transaction(sig.signature)
            if detail is None:
                logger.debug("No detail for %s, skipping", sig.signature)
                continue
            event = extract_transfer(detail, tenant_id=tenant_id, address=address)
            if event is None:
                continue

            self._state = CycleState.NOTIFYING
            report.events += 1
            delivered = await self._dispatcher.dispatch(event)
            if delivered:
                report.notified += 1
            if self._metrics:
                self._metrics.record_notification(delivered=delivered)

        self._state = CycleState.ADVANCING_CURSOR
        await self._cursors.set(tenant_id, address, diff.cursor, slot=diff.cursor_slot)
        return TargetOutcome.POLLED

    async def _update_cursor_gauge(self) -> None:
        if self._metrics is None:
            return
        snapshot = await self._cursors.snapshot()
        self._metrics.set_cursor_count(sum(len(v) for v in snapshot.values()))
