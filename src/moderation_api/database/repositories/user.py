"""User repository for the moderation API."""

from datetime import datetime
from uuid import UUID

from asyncpg import Connection
from asyncpg import Record

from moderation_api.database.models.user import User
from moderation_api.database.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user operations."""

    def __init__(self):
        super().__init__("users")

    def _record_to_model(self, record: Record) -> User:
        """Convert database record to User model."""
        return User.model_validate(dict(record))

    async def suspend_user(
        self,
        user_pk: UUID,
        suspended_until: datetime,
        reason: str,
        report_pk: UUID,
        connection: Connection | None = None,
    ) -> bool:
        """Suspend a user on behalf of a report.

        Applying the same report's suspension twice is a no-op and returns
        False. Raises ValueError when the user does not exist.
        """
        query = f"""
            UPDATE {self.table_name}
            SET is_suspended = TRUE,
                suspended_until = $2,
                suspension_reason = $3,
                suspension_report_pk = $4,
                updated_at = NOW()
            WHERE pk = $1
            AND (is_suspended IS NOT TRUE OR suspension_report_pk IS DISTINCT FROM $4)
            RETURNING pk
        """  # nosec B608

        async with self._connection(connection) as conn:
            updated = await conn.fetchval(
                query, user_pk, suspended_until, reason, report_pk
            )
            if updated is not None:
                return True

            if not await self.exists(user_pk, conn):
                raise ValueError(f"User {user_pk} not found")
            return False

    async def lift_expired_suspensions(self, now: datetime) -> int:
        """Clear suspensions whose end date has passed."""
        query = f"""
            UPDATE {self.table_name}
            SET is_suspended = FALSE, updated_at = NOW()
            WHERE is_suspended = TRUE
            AND suspended_until IS NOT NULL
            AND suspended_until <= $1
        """  # nosec B608

        async with self._connection() as conn:
            result = await conn.execute(query, now)
            # asyncpg returns the command tag, e.g. "UPDATE 3"
            return int(result.split()[-1]) if result else 0
