"""Notification repository backing the database notification sink."""

from typing import Any

from asyncpg import Record

from moderation_api.database.models.notification import NotificationMessage
from moderation_api.database.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[dict[str, Any]]):
    """Repository for user and administrator notifications."""

    def __init__(self):
        super().__init__("notifications")
        self.admin_table_name = "admin_notifications"

    def _record_to_model(self, record: Record) -> dict[str, Any]:
        """Convert database record to a plain dictionary."""
        return dict(record)

    async def create_user_notification(
        self, notification: NotificationMessage
    ) -> dict[str, Any]:
        """Store a notification for a single user."""
        return await self.create_from_dict(
            {
                "user_pk": notification.user_pk,
                "type": notification.type,
                "title": notification.title,
                "message": notification.message,
                "public_note": notification.public_note,
                "report_pk": notification.report_pk,
                "metadata": notification.metadata,
            }
        )

    async def create_admin_notification(
        self, notification: NotificationMessage
    ) -> dict[str, Any]:
        """Store a notification for the administrators."""
        query = f"""
            INSERT INTO {self.admin_table_name} (type, report_pk, title, message, metadata)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING *
        """  # nosec B608

        async with self._connection() as conn:
            record = await conn.fetchrow(
                query,
                notification.type,
                notification.report_pk,
                notification.title,
                notification.message,
                notification.metadata,
            )
            if record is None:
                raise ValueError(f"Failed to create record in {self.admin_table_name}")
            return self._record_to_model(record)
