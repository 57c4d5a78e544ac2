"""Warning repository for moderation warnings."""

from asyncpg import Connection
from asyncpg import Record

from moderation_api.database.models.warning import Warning  # noqa: A004
from moderation_api.database.models.warning import WarningCreate
from moderation_api.database.repositories.base import BaseRepository


class WarningRepository(BaseRepository[Warning]):
    """Repository for warning operations."""

    def __init__(self):
        super().__init__("warnings")

    def _record_to_model(self, record: Record) -> Warning:
        """Convert database record to Warning model."""
        return Warning.model_validate(dict(record))

    async def create_warning(
        self, warning_data: WarningCreate, connection: Connection | None = None
    ) -> Warning | None:
        """Create a warning, once per report.

        Returns None when the report already produced a warning.
        """
        query = f"""
            INSERT INTO {self.table_name}
                (user_pk, report_pk, content_pk, content_type, reason, created_at, expires_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            ON CONFLICT (report_pk) DO NOTHING
            RETURNING *
        """  # nosec B608

        async with self._connection(connection) as conn:
            record = await conn.fetchrow(
                query,
                warning_data.user_pk,
                warning_data.report_pk,
                warning_data.content_pk,
                warning_data.content_type.value,
                warning_data.reason,
                warning_data.created_at,
                warning_data.expires_at,
            )
            return self._record_to_model(record) if record else None
