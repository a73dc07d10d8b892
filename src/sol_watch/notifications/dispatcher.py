"""Notification dispatcher — format, deliver and pace transfer notifications."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from sol_watch.notifications.message import build_message

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sol_watch.config.settings import NotifierConfig
    from sol_watch.notifications.message import NotificationMessage
    from sol_watch.tenants.directory import TenantDirectory
    from sol_watch.watcher.transfer import TransferEvent

logger = logging.getLogger(__name__)

DEFAULT_SEND_DELAY = 0.5  # seconds


class NotificationSender(Protocol):
    """Chat-platform delivery surface."""

    async def send(self, destination: str, message: NotificationMessage) -> bool: ...


class NotificationDispatcher:
    """Delivers transfer events to the owning tenant's destination.

    After every successful send the dispatcher sleeps ``send_delay``
    seconds, so consecutive sends of one target poll stay under the
    destination's own rate limit. The pause belongs to the caller's task;
    targets processed concurrently do not share it.
    """

    def __init__(
        self,
        directory: TenantDirectory,
        sender: NotificationSender,
        config: NotifierConfig,
        *,
        send_delay: float = DEFAULT_SEND_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._directory = directory
        self._sender = sender
        self._config = config
        self._send_delay = send_delay
        self._sleep = sleep

    async def dispatch(self, event: TransferEvent) -> bool:
        """Send *event* to its tenant's channel.

        Returns:
            True if the message was delivered. A tenant without a
            destination, or a failed send, yields False.
        """
        destination = await self._directory.resolve_notification_destination(event.tenant_id)
        if not destination:
            logger.debug("No destination for tenant %s, dropping %s", event.tenant_id, event.signature)
            return False

        message = build_message(
            event,
            explorer_url=self._config.explorer_url,
            branding=self._config.branding,
        )
        try:
            delivered = await self._sender.send(destination, message)
        except Exception:
            logger.exception("Notification send failed for tenant %s", event.tenant_id)
            return False

        if not delivered:
            logger.warning("Notification for %s not delivered to tenant %s", event.signature, event.tenant_id)
            return False

        logger.info(
            "Notified tenant %s: %s %s SOL (%s)",
            event.tenant_id,
            event.direction.value,
            message.amount,
            event.signature,
        )
        await self._sleep(self._send_delay)
        return True
