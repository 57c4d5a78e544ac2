"""Base repository class for the moderation API."""

from abc import ABC
from abc import abstractmethod
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from typing import Generic
from typing import TypeVar
from uuid import UUID

from asyncpg import Connection
from asyncpg import Record

from moderation_api.database.connection import get_db_connection


T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Base repository class with common database operations.

    Every method takes an optional ``connection`` so that callers can run
    several repository calls inside one transaction.
    """

    def __init__(self, table_name: str):
        self.table_name = table_name

    @abstractmethod
    def _record_to_model(self, record: Record) -> T:
        """Convert database record to model instance."""

    @asynccontextmanager
    async def _connection(
        self, connection: Connection | None = None
    ) -> AsyncGenerator[Connection]:
        """Use the given connection, or borrow one from the pool."""
        if connection is not None:
            yield connection
            return

        async with get_db_connection() as pooled:
            yield pooled

    async def get_by_pk(
        self, pk: UUID, connection: Connection | None = None
    ) -> T | None:
        """Get a record by primary key."""
        query = f"SELECT * FROM {self.table_name} WHERE pk = $1"  # nosec B608

        async with self._connection(connection) as conn:
            record = await conn.fetchrow(query, pk)
            return self._record_to_model(record) if record else None

    async def count(
        self, where_clause: str = "", params: list[Any] | None = None
    ) -> int:
        """Count records with optional where clause."""
        if params is None:
            params = []

        query = f"SELECT COUNT(*) FROM {self.table_name}"  # nosec B608
        if where_clause:
            query += f" WHERE {where_clause}"

        async with self._connection() as conn:
            result = await conn.fetchval(query, *params)
            return result or 0

    async def exists(self, pk: UUID, connection: Connection | None = None) -> bool:
        """Check if a record exists by primary key."""
        query = f"SELECT EXISTS(SELECT 1 FROM {self.table_name} WHERE pk = $1)"  # nosec B608

        async with self._connection(connection) as conn:
            result = await conn.fetchval(query, pk)
            return bool(result)

    async def create_from_dict(
        self, data: dict[str, Any], connection: Connection | None = None
    ) -> T:
        """Create a new record."""
        columns = list(data.keys())
        placeholders = [f"${i + 1}" for i in range(len(columns))]
        values = list(data.values())

        query = f"""
            INSERT INTO {self.table_name} ({", ".join(columns)})
            VALUES ({", ".join(placeholders)})
            RETURNING *
        """  # nosec B608

        async with self._connection(connection) as conn:
            record = await conn.fetchrow(query, *values)
            if record is None:
                raise ValueError(f"Failed to create record in {self.table_name}")
            return self._record_to_model(record)
