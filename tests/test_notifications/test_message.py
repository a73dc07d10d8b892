"""Tests for notification message rendering."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from sol_watch.notifications.message import (
    COLOR_INBOUND,
    COLOR_OUTBOUND,
    TITLE,
    build_message,
    format_amount,
)
from sol_watch.watcher.transfer import Direction, TransferEvent

_ADDRESS = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
_WHEN = datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)


def _event(amount: str, direction: Direction) -> TransferEvent:
    return TransferEvent(
        tenant_id="g1",
        address=_ADDRESS,
        signature="5xSig",
        amount=Decimal(amount),
        direction=direction,
        timestamp=_WHEN,
    )


class TestFormatAmount:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            ("1", "1.0000"),
            ("0.25", "0.2500"),
            ("0.000000001", "0.0000"),
            ("0.00005", "0.0001"),
            ("12.34564999", "12.3456"),
        ],
    )
    def test_four_places(self, amount: str, expected: str) -> None:
        assert format_amount(Decimal(amount)) == expected


class TestBuildMessage:
    def test_inbound(self) -> None:
        msg = build_message(
            _event("1.5", Direction.INBOUND),
            explorer_url="https://solscan.io/tx",
            branding="Powered by Solana Wallet Bot",
        )
        assert msg.title == TITLE
        assert msg.url == "https://solscan.io/tx/5xSig"
        assert msg.address == _ADDRESS
        assert msg.amount == "1.5000"
        assert msg.direction is Direction.INBOUND
        assert msg.color == COLOR_INBOUND
        assert msg.timestamp == _WHEN
        assert msg.footer == "Powered by Solana Wallet Bot"

    def test_outbound_color(self) -> None:
        msg = build_message(_event("2", Direction.OUTBOUND), explorer_url="https://x/tx", branding="b")
        assert msg.color == COLOR_OUTBOUND
        assert msg.direction is Direction.OUTBOUND

    def test_trailing_slash_in_explorer_url(self) -> None:
        msg = build_message(_event("2", Direction.INBOUND), explorer_url="https://x/tx/", branding="b")
        assert msg.url == "https://x/tx/5xSig"


class TestEmbed:
    def test_payload_shape(self) -> None:
        msg = build_message(_event("0.25", Direction.OUTBOUND), explorer_url="https://x/tx", branding="b")
        payload = msg.to_payload()

        assert list(payload) == ["embeds"]
        embed = payload["embeds"][0]
        assert embed["title"] == TITLE
        assert embed["description"] == "[View on Solscan](https://x/tx/5xSig)"
        assert embed["color"] == COLOR_OUTBOUND
        assert embed["fields"] == [
            {"name": "Wallet", "value": _ADDRESS},
            {"name": "Amount (SOL)", "value": "0.2500"},
            {"name": "Type", "value": "OUT"},
        ]
        assert embed["timestamp"] == "2023-11-14T22:13:20+00:00"
        assert embed["footer"] == {"text": "b"}
