"""Transfer extraction — net SOL movement of one address in one transaction."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sol_watch.ledger.models import TransactionDetail

LAMPORTS_PER_SOL = Decimal(1_000_000_000)


class Direction(enum.StrEnum):
    """Side of the transfer from the watched address' point of view."""

    INBOUND = "IN"
    OUTBOUND = "OUT"


@dataclass(frozen=True)
class TransferEvent:
    """A detected transfer, consumed immediately by the dispatcher."""

    tenant_id: str
    address: str
    signature: str
    amount: Decimal  # SOL, never negative
    direction: Direction
    timestamp: datetime


def balance_delta(detail: TransactionDetail, address: str) -> int | None:
    """Return ``post - pre`` lamports for *address*, or None if it is absent.

    An address can appear more than once in the key list. Every position is
    visited in order and the last match wins.
    """
    delta: int | None = None
    for index, key in enumerate(detail.account_keys):
        if key != address:
            continue
        pre = detail.pre_balances[index] if index < len(detail.pre_balances) else 0
        post = detail.post_balances[index] if index < len(detail.post_balances) else 0
        delta = post - pre
    return delta


def extract_transfer(
    detail: TransactionDetail,
    *,
    tenant_id: str,
    address: str,
    now: datetime | None = None,
) -> TransferEvent | None:
    """Derive the transfer event of *address* in *detail*.

    Returns None when the address does not appear in the transaction or its
    balance did not change (fee-only or no-op interactions).
    """
    delta = balance_delta(detail, address)
    if not delta:
        return None

    if detail.block_time is not None:
        timestamp = datetime.fromtimestamp(detail.block_time, tz=UTC)
    else:
        timestamp = now or datetime.now(tz=UTC)

    return TransferEvent(
        tenant_id=tenant_id,
        address=address,
        signature=detail.signature,
        amount=Decimal(abs(delta)) / LAMPORTS_PER_SOL,
        direction=Direction.INBOUND if delta > 0 else Direction.OUTBOUND,
        timestamp=timestamp,
    )
