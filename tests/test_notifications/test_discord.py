"""Tests for the Discord webhook sender — uses httpx mock transport."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import httpx
import pytest

from sol_watch.notifications.discord import DiscordWebhookSender
from sol_watch.notifications.message import COLOR_INBOUND, TITLE, NotificationMessage
from sol_watch.watcher.transfer import Direction

_HOOK = "https://discord.example/api/webhooks/1/token"


def _message() -> NotificationMessage:
    return NotificationMessage(
        title=TITLE,
        url="https://solscan.io/tx/5xSig",
        address="9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM",
        amount="1.0000",
        direction=Direction.INBOUND,
        color=COLOR_INBOUND,
        timestamp=datetime(2024, 1, 1, tzinfo=UTC),
        footer="Powered by Solana Wallet Bot",
    )


def _sender(handler) -> DiscordWebhookSender:
    sender = DiscordWebhookSender(retry_delay=0)
    sender._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return sender


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_stop(self) -> None:
        sender = DiscordWebhookSender()
        assert not sender.is_running
        await sender.start()
        assert sender.is_running
        await sender.stop()
        assert not sender.is_running

    @pytest.mark.asyncio
    async def test_send_before_start(self) -> None:
        sender = DiscordWebhookSender()
        assert await sender.send(_HOOK, _message()) is False


class TestSend:
    @pytest.mark.asyncio
    async def test_posts_embed(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(204)

        sender = _sender(handler)
        assert await sender.send(_HOOK, _message()) is True

        assert len(requests) == 1
        assert str(requests[0].url) == _HOOK
        body = json.loads(requests[0].content)
        assert body["embeds"][0]["title"] == TITLE
        assert body["embeds"][0]["fields"][2] == {"name": "Type", "value": "IN"}
        await sender.stop()

    @pytest.mark.asyncio
    async def test_retries_once(self) -> None:
        statuses = [500, 204]

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(statuses.pop(0))

        sender = _sender(handler)
        assert await sender.send(_HOOK, _message()) is True
        assert statuses == []
        await sender.stop()

    @pytest.mark.asyncio
    async def test_gives_up_after_retry(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(404)

        sender = _sender(handler)
        assert await sender.send(_HOOK, _message()) is False
        assert calls == 2
        await sender.stop()

    @pytest.mark.asyncio
    async def test_transport_error_reported(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        sender = _sender(handler)
        assert await sender.send(_HOOK, _message()) is False
        await sender.stop()
