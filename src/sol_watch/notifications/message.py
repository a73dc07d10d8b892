"""Notification message — destination-agnostic rendering of a transfer."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any

from sol_watch.watcher.transfer import Direction

if TYPE_CHECKING:
    from datetime import datetime

    from sol_watch.watcher.transfer import TransferEvent

TITLE = "🚨 New Solana Transaction"
COLOR_INBOUND = 0x00FF00
COLOR_OUTBOUND = 0xFF0000

_FOUR_PLACES = Decimal("0.0001")


@dataclass(frozen=True)
class NotificationMessage:
    """Fixed-shape message describing one transfer."""

    title: str
    url: str
    address: str
    amount: str  # SOL, 4 decimal places
    direction: Direction
    color: int
    timestamp: datetime
    footer: str

    def to_embed(self) -> dict[str, Any]:
        """Render as a Discord-style embed object."""
        return {
            "title": self.title,
            "description": f"[View on Solscan]({self.url})",
            "url": self.url,
            "color": self.color,
            "fields": [
                {"name": "Wallet", "value": self.address},
                {"name": "Amount (SOL)", "value": self.amount},
                {"name": "Type", "value": self.direction.value},
            ],
            "timestamp": self.timestamp.isoformat(),
            "footer": {"text": self.footer},
        }

    def to_payload(self) -> dict[str, Any]:
        """Render as a webhook request body."""
        return {"embeds": [self.to_embed()]}


def format_amount(amount: Decimal) -> str:
    """Format a SOL amount with exactly four decimal places."""
    return str(amount.quantize(_FOUR_PLACES, rounding=ROUND_HALF_UP))


def build_message(event: TransferEvent, *, explorer_url: str, branding: str) -> NotificationMessage:
    """Build the notification for *event*."""
    inbound = event.direction is Direction.INBOUND
    return NotificationMessage(
        title=TITLE,
        url=f"{explorer_url.rstrip('/')}/{event.signature}",
        address=event.address,
        amount=format_amount(event.amount),
        direction=event.direction,
        color=COLOR_INBOUND if inbound else COLOR_OUTBOUND,
        timestamp=event.timestamp,
        footer=branding,
    )
