"""Shared test fixtures for the sol-watch test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from sol_watch.config.settings import NotifierConfig, WatcherConfig
from sol_watch.errors.ledger_errors import LedgerError
from sol_watch.ledger.models import SignatureInfo, TransactionDetail
from sol_watch.notifications.dispatcher import NotificationDispatcher
from sol_watch.tenants.directory import MemoryTenantDirectory
from sol_watch.watcher.cursor import MemoryCursorStore
from sol_watch.watcher.orchestrator import WatchCycle

if TYPE_CHECKING:
    from collections.abc import Callable

    from sol_watch.notifications.message import NotificationMessage


class FakeLedger:
    """Scripted ledger client.

    ``signatures`` maps address → newest-first signature strings,
    ``details`` maps signature → TransactionDetail (missing → None),
    ``slots`` maps signature → slot, assigned in push order.
    ``list_errors`` / ``detail_errors`` raise the given exception once.
    """

    def __init__(self) -> None:
        self.signatures: dict[str, list[str]] = {}
        self.details: dict[str, TransactionDetail] = {}
        self.slots: dict[str, int] = {}
        self.list_errors: dict[str, LedgerError] = {}
        self.detail_errors: dict[str, LedgerError] = {}
        self.list_calls: list[tuple[str, int]] = []
        self.detail_calls: list[str] = []

    async def get_signatures_for_address(self, address: str, limit: int) -> list[SignatureInfo]:
        self.list_calls.append((address, limit))
        if address in self.list_errors:
            raise self.list_errors.pop(address)
        history = self.signatures.get(address, [])[:limit]
        return [SignatureInfo(signature=s, slot=self.slots.get(s, 0)) for s in history]

    async def get_transaction(self, signature: str) -> TransactionDetail | None:
        self.detail_calls.append(signature)
        if signature in self.detail_errors:
            raise self.detail_errors.pop(signature)
        return self.details.get(signature)

    def push(self, address: str, *signatures: str) -> None:
        """Prepend newer signatures (given oldest first) to an address history."""
        history = self.signatures.setdefault(address, [])
        for sig in signatures:
            self.slots.setdefault(sig, len(self.slots) + 1)
            history.insert(0, sig)


class FakeSender:
    """Records every message; ``fail`` makes sends report failure."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, NotificationMessage]] = []
        self.fail = False

    async def send(self, destination: str, message: NotificationMessage) -> bool:
        if self.fail:
            return False
        self.sent.append((destination, message))
        return True


class FakeSleep:
    """Awaitable sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def watcher_config() -> WatcherConfig:
    return WatcherConfig(interval=30.0, signature_limit=10, send_delay=0.5, rate_limit_pause=5.0)


@pytest.fixture
def notifier_config() -> NotifierConfig:
    return NotifierConfig()


@pytest.fixture
def directory() -> MemoryTenantDirectory:
    return MemoryTenantDirectory()


@pytest.fixture
def cursors() -> MemoryCursorStore:
    return MemoryCursorStore()


@pytest.fixture
def dispatcher(directory, sender, notifier_config, watcher_config, sleep) -> NotificationDispatcher:
    return NotificationDispatcher(
        directory,
        sender,
        notifier_config,
        send_delay=watcher_config.send_delay,
        sleep=sleep,
    )


@pytest.fixture
def cycle(ledger, directory, cursors, dispatcher, watcher_config, sleep) -> WatchCycle:
    return WatchCycle(ledger, directory, cursors, dispatcher, watcher_config, sleep=sleep)


@pytest.fixture
def make_detail() -> Callable[..., TransactionDetail]:
    """Factory for TransactionDetail objects."""

    def _make(
        signature: str,
        keys: list[str],
        pre: list[int],
        post: list[int],
        block_time: int | None = 1_700_000_000,
    ) -> TransactionDetail:
        return TransactionDetail(
            signature=signature,
            pre_balances=pre,
            post_balances=post,
            account_keys=keys,
            block_time=block_time,
        )

    return _make
