"""Content repository covering every reportable record collection."""

from datetime import datetime
from typing import Any
from uuid import UUID

from asyncpg import Connection
from asyncpg import Record

from moderation_api.database.models.base import ContentType
from moderation_api.database.repositories.base import BaseRepository

CONTENT_TABLES: dict[ContentType, str] = {
    ContentType.POST: "posts",
    ContentType.COMMENT: "comments",
    ContentType.MESSAGE: "messages",
    ContentType.PROFILE: "users",
    ContentType.PRODUCT: "products",
}

REMOVED = "removed"


class ContentTableRepository(BaseRepository[dict[str, Any]]):
    """Moderation operations on a single content table.

    Content rows are schemaless from this service's point of view, so they are
    returned as plain dictionaries.
    """

    def _record_to_model(self, record: Record) -> dict[str, Any]:
        """Convert database record to a plain dictionary."""
        return dict(record)

    async def flag_for_review(
        self, content_pk: UUID, report_pk: UUID, flagged_at: datetime
    ) -> bool:
        """Hide content until a reviewer has looked at it."""
        query = f"""
            UPDATE {self.table_name}
            SET flagged_for_review = TRUE,
                flagged_at = $2,
                flagged_report_pk = $3,
                visibility = 'hidden',
                updated_at = NOW()
            WHERE pk = $1
        """  # nosec B608

        async with self._connection() as conn:
            result = await conn.execute(query, content_pk, flagged_at, report_pk)
            return result == "UPDATE 1"

    async def mark_removed(
        self,
        content_pk: UUID,
        reason: str,
        report_pk: UUID,
        removed_at: datetime,
        connection: Connection | None = None,
    ) -> bool:
        """Mark content as removed by moderation.

        Returns True when the row changed and False when it was already
        removed. Raises ValueError when the content row does not exist.
        """
        query = f"""
            UPDATE {self.table_name}
            SET moderation_status = $2,
                removed_at = $3,
                removal_reason = $4,
                removal_report_pk = $5,
                updated_at = NOW()
            WHERE pk = $1 AND moderation_status IS DISTINCT FROM $2
            RETURNING pk
        """  # nosec B608

        async with self._connection(connection) as conn:
            updated = await conn.fetchval(
                query, content_pk, REMOVED, removed_at, reason, report_pk
            )
            if updated is not None:
                return True

            if not await self.exists(content_pk, conn):
                raise ValueError(f"Content {content_pk} not found in {self.table_name}")
            return False


class ContentRepository:
    """Dispatches content operations to the table backing each content type."""

    def __init__(self) -> None:
        self._tables = {
            content_type: ContentTableRepository(table_name)
            for content_type, table_name in CONTENT_TABLES.items()
        }

    def for_type(self, content_type: ContentType | str) -> ContentTableRepository:
        """Get the table repository for a content type."""
        return self._tables[ContentType(content_type)]

    async def get_content(
        self, content_type: ContentType | str, content_pk: UUID
    ) -> dict[str, Any] | None:
        """Fetch a content record, or None when it does not exist."""
        return await self.for_type(content_type).get_by_pk(content_pk)

    async def flag_for_review(
        self,
        content_type: ContentType | str,
        content_pk: UUID,
        report_pk: UUID,
        flagged_at: datetime,
    ) -> bool:
        """Hide content pending review."""
        return await self.for_type(content_type).flag_for_review(
            content_pk, report_pk, flagged_at
        )

    async def mark_removed(
        self,
        content_type: ContentType | str,
        content_pk: UUID,
        reason: str,
        report_pk: UUID,
        removed_at: datetime,
        connection: Connection | None = None,
    ) -> bool:
        """Mark content as removed by moderation."""
        return await self.for_type(content_type).mark_removed(
            content_pk, reason, report_pk, removed_at, connection
        )
