"""Notifications — message rendering, webhook delivery, paced dispatch.

Provides:
- ``NotificationMessage`` / ``build_message`` — fixed-shape transfer message
- ``DiscordWebhookSender`` — posts embeds to a webhook URL
- ``NotificationDispatcher`` — resolves the destination and paces sends
"""

from __future__ import annotations

from sol_watch.notifications.discord import DiscordWebhookSender
from sol_watch.notifications.dispatcher import NotificationDispatcher, NotificationSender
from sol_watch.notifications.message import NotificationMessage, build_message

__all__ = [
    "DiscordWebhookSender",
    "NotificationDispatcher",
    "NotificationMessage",
    "NotificationSender",
    "build_message",
]
