"""WatchEngine — owns the ledger client, tenant directory and watch cycle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sol_watch.ledger.address import normalize_address

if TYPE_CHECKING:
    from sol_watch.config.settings import AppConfig
    from sol_watch.ledger import LedgerClient
    from sol_watch.metrics.collector import WatcherMetrics
    from sol_watch.notifications.dispatcher import NotificationSender
    from sol_watch.taskmanager.manager import TaskManager
    from sol_watch.tenants.directory import MemoryTenantDirectory
    from sol_watch.watcher.cursor import MemoryCursorStore
    from sol_watch.watcher.orchestrator import WatchCycle

logger = logging.getLogger(__name__)

_ERR_NOT_INITIALIZED = "Engine not initialized. Call initialize() first."


class WatchEngine:
    """Central engine wiring collaborators into the watch cycle.

    ``ledger`` and ``sender`` may be injected; otherwise a
    :class:`SolanaRPCClient` and a :class:`DiscordWebhookSender` are built
    from the configuration and owned by the engine.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        ledger: LedgerClient | None = None,
        sender: NotificationSender | None = None,
        metrics: WatcherMetrics | None = None,
    ) -> None:
        self._config = config
        self._initialized = False
        self._ledger = ledger
        self._sender = sender
        self._owns_ledger = ledger is None
        self._owns_sender = sender is None
        self._metrics = metrics

        self._directory: MemoryTenantDirectory | None = None
        self._cursors: MemoryCursorStore | None = None
        self._cycle: WatchCycle | None = None
        self._task_manager: TaskManager | None = None

    async def initialize(self) -> None:
        """Connect clients, seed tenants and start the watch job.

        Raises:
            RuntimeError: If already initialized.
        """
        if self._initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        from sol_watch.ledger.client import SolanaRPCClient
        from sol_watch.metrics.collector import WatcherMetrics
        from sol_watch.notifications.discord import DiscordWebhookSender
        from sol_watch.notifications.dispatcher import NotificationDispatcher
        from sol_watch.taskmanager.manager import WATCH_JOB, CronJob, TaskManager
        from sol_watch.tenants.directory import MemoryTenantDirectory
        from sol_watch.watcher.cursor import MemoryCursorStore
        from sol_watch.watcher.orchestrator import WatchCycle

        if self._ledger is None:
            rpc = SolanaRPCClient(self._config.rpc)
            await rpc.connect()
            self._ledger = rpc
        if self._sender is None:
            webhook = DiscordWebhookSender(timeout=self._config.notifier.timeout)
            await webhook.start()
            self._sender = webhook
        if self._metrics is None and self._config.metrics.enabled:
            self._metrics = WatcherMetrics()

        self._directory = MemoryTenantDirectory.from_config(self._config.tenants)
        self._cursors = MemoryCursorStore()
        watcher = self._config.watcher
        dispatcher = NotificationDispatcher(
            self._directory,
            self._sender,
            self._config.notifier,
            send_delay=watcher.send_delay,
        )
        self._cycle = WatchCycle(
            self._ledger,
            self._directory,
            self._cursors,
            dispatcher,
            watcher,
            metrics=self._metrics,
        )

        if watcher.enabled:
            self._task_manager = TaskManager(metrics=self._metrics)
            self._task_manager.register(
                WATCH_JOB,
                CronJob(handler=self._cycle.run_watch_cycle, period=watcher.interval),
            )
            await self._task_manager.start()

        self._initialized = True
        logger.info("Watch engine initialized with %d tenants", len(self._config.tenants))

    async def close(self) -> None:
        """Stop the watch job and close owned clients (idempotent)."""
        if not self._initialized:
            return

        if self._task_manager is not None:
            await self._task_manager.stop()
            self._task_manager = None

        if self._owns_sender and self._sender is not None:
            await self._sender.stop()  # type: ignore[attr-defined]
            self._sender = None
        if self._owns_ledger and self._ledger is not None:
            await self._ledger.close()  # type: ignore[attr-defined]
            self._ledger = None

        self._cycle = None
        self._cursors = None
        self._directory = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if the engine is initialized."""
        return self._initialized

    @property
    def config(self) -> AppConfig:
        """Get the application configuration."""
        return self._config

    @property
    def metrics(self) -> WatcherMetrics | None:
        """Get the metrics tracker, if metrics are enabled."""
        return self._metrics

    @property
    def directory(self) -> MemoryTenantDirectory:
        """Get the tenant directory."""
        if self._directory is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._directory

    @property
    def cursors(self) -> MemoryCursorStore:
        """Get the cursor store."""
        if self._cursors is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._cursors

    @property
    def cycle(self) -> WatchCycle:
        """Get the watch cycle orchestrator."""
        if self._cycle is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._cycle

    @property
    def task_manager(self) -> TaskManager | None:
        """Get the task manager (None when the watcher is disabled)."""
        return self._task_manager

    # ------------------------------------------------------------------
    # Watch-list management
    # ------------------------------------------------------------------

    async def add_address(self, tenant_id: str, address: str) -> str | None:
        """Add an address to a tenant and seed its cursor.

        Existing history of the address is ignored from this point on.

        Returns:
            The seeded signature, or None if the address has no history
            (the first cycle seeds it instead).

        Raises:
            InvalidAddressError: The address is malformed.
            QuotaExceededError: The tenant's plan limit is reached.
            LedgerError: The seeding lookup failed; the address stays added
                and is seeded by the next cycle.
        """
        address = normalize_address(address)
        added = await self.directory.add_address(tenant_id, address)
        if not added:
            return await self.cursors.get(tenant_id, address)
        return await self.cycle.prime_target(tenant_id, address)

    async def remove_address(self, tenant_id: str, address: str) -> bool:
        """Remove an address from a tenant and drop its cursor."""
        address = normalize_address(address)
        removed = await self.directory.remove_address(tenant_id, address)
        await self.cycle.forget_target(tenant_id, address)
        return removed
