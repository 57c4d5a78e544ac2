"""Report repository for the moderation queue."""

from datetime import datetime
from typing import Any
from uuid import UUID

from asyncpg import Connection
from asyncpg import Record

from moderation_api.database.models.base import OPEN_REPORT_STATUSES
from moderation_api.database.models.base import ReportStatus
from moderation_api.database.models.report import ActionOutcome
from moderation_api.database.models.report import Report
from moderation_api.database.repositories.base import BaseRepository

_OPEN_STATUS_VALUES = [status.value for status in OPEN_REPORT_STATUSES]


class ReportRepository(BaseRepository[Report]):
    """Repository for moderation report operations."""

    def __init__(self) -> None:
        """Initialize the report repository."""
        super().__init__("moderation_reports")

    def _record_to_model(self, record: Record) -> Report:
        """Convert database record to Report model."""
        return Report.model_validate(dict(record))

    async def has_open_report(self, content_pk: UUID, reporter_pk: UUID) -> bool:
        """Check whether the reporter already has an open report on the content."""
        query = f"""
            SELECT EXISTS(
                SELECT 1 FROM {self.table_name}
                WHERE content_pk = $1
                AND reporter_pk = $2
                AND status = ANY($3::text[])
            )
        """  # nosec B608

        async with self._connection() as conn:
            result = await conn.fetchval(
                query, content_pk, reporter_pk, _OPEN_STATUS_VALUES
            )
            return bool(result)

    async def create_report(self, data: dict[str, Any]) -> Report:
        """Insert a new report.

        Raises ``asyncpg.UniqueViolationError`` when an open report for the
        same content and reporter already exists.
        """
        return await self.create_from_dict(data)

    def _queue_filters(
        self,
        status: str | None,
        priority: str | None,
        content_type: str | None,
    ) -> tuple[str, list[Any]]:
        conditions = []
        params: list[Any] = []

        for column, value in (
            ("status", status),
            ("priority", priority),
            ("content_type", content_type),
        ):
            if value is not None:
                params.append(value)
                conditions.append(f"{column} = ${len(params)}")

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        return where_clause, params

    async def list_reports(
        self,
        status: str | None = None,
        priority: str | None = None,
        content_type: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Report]:
        """List reports newest first with optional filters."""
        where_clause, params = self._queue_filters(status, priority, content_type)
        query = f"""
            SELECT * FROM {self.table_name}
            {where_clause}
            ORDER BY created_at DESC
            LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
        """  # nosec B608

        async with self._connection() as conn:
            rows = await conn.fetch(query, *params, limit, offset)
            return [self._record_to_model(row) for row in rows]

    async def count_by_status(self, status: str | None = None) -> int:
        """Count reports in a status, or all reports when status is None."""
        if status is None:
            return await self.count()
        return await self.count("status = $1", [status])

    async def get_reports_since(self, since: datetime) -> list[Report]:
        """Get every report created at or after the given time."""
        query = f"""
            SELECT * FROM {self.table_name}
            WHERE created_at >= $1
            ORDER BY created_at DESC
        """  # nosec B608

        async with self._connection() as conn:
            rows = await conn.fetch(query, since)
            return [self._record_to_model(row) for row in rows]

    async def mark_under_review(self, report_pk: UUID) -> Report | None:
        """Move a pending report to under_review.

        Returns None when the report is not pending.
        """
        query = f"""
            UPDATE {self.table_name}
            SET status = $2, updated_at = NOW()
            WHERE pk = $1 AND status = $3
            RETURNING *
        """  # nosec B608

        async with self._connection() as conn:
            record = await conn.fetchrow(
                query,
                report_pk,
                ReportStatus.UNDER_REVIEW.value,
                ReportStatus.PENDING.value,
            )
            return self._record_to_model(record) if record else None

    async def record_review(
        self,
        report_pk: UUID,
        review: dict[str, Any],
        connection: Connection | None = None,
    ) -> Report | None:
        """Write the review fields onto an open report.

        The write only applies while the report is pending or under review, so
        the review fields are set at most once. Returns None otherwise.
        """
        columns = list(review.keys())
        set_clauses = [f"{column} = ${i + 2}" for i, column in enumerate(columns)]
        status_param = len(columns) + 2
        query = f"""
            UPDATE {self.table_name}
            SET {", ".join(set_clauses)}, updated_at = NOW()
            WHERE pk = $1 AND status = ANY(${status_param}::text[])
            RETURNING *
        """  # nosec B608

        async with self._connection(connection) as conn:
            record = await conn.fetchrow(
                query, report_pk, *review.values(), _OPEN_STATUS_VALUES
            )
            return self._record_to_model(record) if record else None

    async def record_action_failure(
        self, report_pk: UUID, outcome: ActionOutcome
    ) -> Report | None:
        """Store a failed action outcome without touching status or review fields."""
        query = f"""
            UPDATE {self.table_name}
            SET action_result = $2, updated_at = NOW()
            WHERE pk = $1 AND status = ANY($3::text[])
            RETURNING *
        """  # nosec B608

        async with self._connection() as conn:
            record = await conn.fetchrow(
                query,
                report_pk,
                outcome.model_dump(mode="json"),
                _OPEN_STATUS_VALUES,
            )
            return self._record_to_model(record) if record else None
