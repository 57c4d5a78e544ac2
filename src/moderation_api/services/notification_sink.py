"""Notification sinks for moderation events."""

import logging

from typing import Protocol

from moderation_api.database.models.notification import NotificationMessage
from moderation_api.database.repositories.notification import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Best-effort delivery of a moderation notification.

    ``deliver`` returns False instead of raising when delivery fails.
    """

    async def deliver(self, message: NotificationMessage) -> bool: ...


class DatabaseNotificationSink:
    """Writes notifications to the notification tables."""

    def __init__(self, notification_repo: NotificationRepository | None = None):
        self.notification_repo = notification_repo or NotificationRepository()

    async def deliver(self, message: NotificationMessage) -> bool:
        try:
            if message.is_admin_alert:
                await self.notification_repo.create_admin_notification(message)
            else:
                await self.notification_repo.create_user_notification(message)
        except Exception:
            logger.exception(
                f"Failed to deliver {message.type} notification for report {message.report_pk}"
            )
            return False

        return True


class NullNotificationSink:
    """Drops every notification."""

    async def deliver(self, message: NotificationMessage) -> bool:
        logger.debug(f"Dropping {message.type} notification")
        return True


def get_notification_sink() -> NotificationSink:
    """Get notification sink instance."""
    return DatabaseNotificationSink()
