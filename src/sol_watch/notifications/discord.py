"""Webhook delivery — posts notification embeds to Discord-compatible webhooks."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from sol_watch.notifications.message import NotificationMessage

logger = logging.getLogger(__name__)

MAX_RETRIES = 1
RETRY_DELAY = 1.0  # seconds


class DiscordWebhookSender:
    """Sends one embed per request to a webhook URL.

    The destination handle is the webhook URL itself. Failures are logged
    and reported as ``False``; they are never raised to the caller.
    """

    def __init__(self, *, timeout: float = 10.0, retry_delay: float = RETRY_DELAY) -> None:
        self._timeout = timeout
        self._retry_delay = retry_delay
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)

    async def stop(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_running(self) -> bool:
        """Whether the HTTP client is open."""
        return self._client is not None

    async def send(self, destination: str, message: NotificationMessage) -> bool:
        """Post *message* to *destination*, retrying once on failure."""
        if self._client is None:
            logger.warning("Webhook sender not started, dropping message")
            return False

        for attempt in range(MAX_RETRIES + 1):
            try:
                resp = await self._client.post(destination, json=message.to_payload())
                if resp.status_code < 400:
                    return True
                logger.warning(
                    "Webhook returned %d (attempt %d/%d)",
                    resp.status_code,
                    attempt + 1,
                    MAX_RETRIES + 1,
                )
            except httpx.HTTPError as exc:
                logger.warning(
                    "Webhook error: %s (attempt %d/%d)",
                    exc,
                    attempt + 1,
                    MAX_RETRIES + 1,
                )
            if attempt < MAX_RETRIES:
                await asyncio.sleep(self._retry_delay)
        return False
