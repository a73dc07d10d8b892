"""Solana RPC response models.

Only the fields the watcher reads are kept:
- ``getSignaturesForAddress`` entries → :class:`SignatureInfo`
- ``getTransaction`` results → :class:`TransactionDetail`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SignatureInfo:
    """One entry of a ``getSignaturesForAddress`` result (newest first)."""

    signature: str
    slot: int = 0
    block_time: int | None = None
    err: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SignatureInfo:
        """Build from the raw JSON-RPC entry."""
        return cls(
            signature=data["signature"],
            slot=data.get("slot", 0) or 0,
            block_time=data.get("blockTime"),
            err=data.get("err"),
        )


def _key_to_str(key: Any) -> str:
    # jsonParsed encoding returns {"pubkey": ..., "signer": ..., ...}
    if isinstance(key, dict):
        return str(key.get("pubkey", ""))
    return str(key)


@dataclass(frozen=True)
class TransactionDetail:
    """Balance view of a confirmed transaction.

    ``account_keys`` is the full ordered key list: static message keys
    followed by writable and readonly keys loaded from address lookup
    tables, which is the order ``pre_balances``/``post_balances`` use.
    """

    signature: str
    pre_balances: list[int] = field(default_factory=list)
    post_balances: list[int] = field(default_factory=list)
    account_keys: list[str] = field(default_factory=list)
    block_time: int | None = None
    slot: int = 0

    @classmethod
    def from_dict(cls, signature: str, data: dict[str, Any]) -> TransactionDetail:
        """Build from a ``getTransaction`` result object."""
        meta: dict[str, Any] = data.get("meta") or {}
        message: dict[str, Any] = (data.get("transaction") or {}).get("message") or {}
        keys = [_key_to_str(k) for k in message.get("accountKeys", [])]
        loaded: dict[str, Any] = meta.get("loadedAddresses") or {}
        keys.extend(str(k) for k in loaded.get("writable", []))
        keys.extend(str(k) for k in loaded.get("readonly", []))
        return cls(
            signature=signature,
            pre_balances=[int(b) for b in meta.get("preBalances", [])],
            post_balances=[int(b) for b in meta.get("postBalances", [])],
            account_keys=keys,
            block_time=data.get("blockTime"),
            slot=data.get("slot", 0) or 0,
        )
