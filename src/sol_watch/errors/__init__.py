"""Error types raised by the watcher and its collaborators."""

from __future__ import annotations

from sol_watch.errors.ledger_errors import LedgerError, RateLimitedError, TransientFetchError
from sol_watch.errors.watch_errors import InvalidAddressError, QuotaExceededError, WatchError

__all__ = [
    "InvalidAddressError",
    "LedgerError",
    "QuotaExceededError",
    "RateLimitedError",
    "TransientFetchError",
    "WatchError",
]
