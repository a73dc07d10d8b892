"""Ledger RPC errors."""

from __future__ import annotations

from sol_watch.errors.watch_errors import WatchError


class LedgerError(WatchError):
    """Error from the Solana JSON-RPC endpoint."""

    def __init__(self, message: str, *, status_code: int = 502, code: str = "ledger-error") -> None:
        super().__init__(message, status_code=status_code, code=code)


class RateLimitedError(LedgerError):
    """The RPC endpoint answered with HTTP 429 or a rate-limit RPC error."""

    def __init__(self, message: str = "ledger RPC rate limited") -> None:
        super().__init__(message, status_code=429, code="rate-limited")


class TransientFetchError(LedgerError):
    """Any other transport, HTTP or JSON-RPC failure."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code, code="transient-fetch")
