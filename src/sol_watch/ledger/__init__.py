"""Ledger access — Solana JSON-RPC client, response models, address checks."""

from __future__ import annotations

from typing import Protocol

from sol_watch.ledger.address import validate_address
from sol_watch.ledger.client import SolanaRPCClient
from sol_watch.ledger.models import SignatureInfo, TransactionDetail


class LedgerClient(Protocol):
    """Read-only ledger surface consumed by the watch cycle."""

    async def get_signatures_for_address(self, address: str, limit: int) -> list[SignatureInfo]: ...
    async def get_transaction(self, signature: str) -> TransactionDetail | None: ...


__all__ = [
    "LedgerClient",
    "SignatureInfo",
    "SolanaRPCClient",
    "TransactionDetail",
    "validate_address",
]
