from typing import Any, Dict, List, Optional

from fastapi import Request
from postgrest.exceptions import APIError
from supabase import create_async_client, AsyncClient

from app.core.errors import DuplicateRecordError, StoreConnectionError, StoreError
from app.core.logger import logger

# Postgres error code for unique_violation
UNIQUE_VIOLATION = "23505"

SERVICES = "services"
BOOKINGS = "bookings"
USERS = "users"
DOCTORS = "doctors"
PAYMENTS = "payments"


class RecordStore:
    """
    Thin async wrapper around the Supabase client.

    All lookups are exact-match filters (column == value). One instance is
    created at startup, shared by every request and closed on shutdown.
    """

    def __init__(self, client: AsyncClient):
        self._client = client

    @classmethod
    async def connect(cls, url: str, key: str) -> "RecordStore":
        """
        Creates the client and checks that the backend answers.
        Raises StoreConnectionError if credentials are missing or the ping fails.
        """
        if not url or not key:
            raise StoreConnectionError("Supabase credentials missing (SUPABASE_URL / SUPABASE_KEY)")

        try:
            client = await create_async_client(url, key)
            await client.table(SERVICES).select("id").limit(1).execute()
        except Exception as e:
            raise StoreConnectionError(f"Cannot reach Supabase at {url}: {e}") from e

        logger.info("✅ Supabase Async client initialized")
        return cls(client)

    async def close(self):
        await self._client.postgrest.aclose()
        logger.info("🔌 Supabase client closed")

    def _filtered(self, builder, filters: Optional[Dict[str, Any]]):
        for column, value in (filters or {}).items():
            builder = builder.eq(column, value)
        return builder

    async def _execute(self, builder, operation: str):
        try:
            response = await builder.execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateRecordError(e.message) from e
            logger.error(f"❌ DB Error ({operation}): {e.message}")
            raise StoreError(e.message) from e
        return response.data or []

    async def find(self, table: str, filters: Optional[Dict[str, Any]] = None, columns: str = "*") -> List[dict]:
        builder = self._filtered(self._client.table(table).select(columns), filters)
        return await self._execute(builder, f"find {table}")

    async def find_one(self, table: str, filters: Dict[str, Any]) -> Optional[dict]:
        builder = self._filtered(self._client.table(table).select("*"), filters).limit(1)
        rows = await self._execute(builder, f"find_one {table}")
        return rows[0] if rows else None

    async def insert_one(self, table: str, values: Dict[str, Any]) -> dict:
        """Inserts a row and returns it as stored. Raises DuplicateRecordError on unique conflicts."""
        rows = await self._execute(self._client.table(table).insert(values), f"insert {table}")
        return rows[0] if rows else values

    async def upsert_one(self, table: str, values: Dict[str, Any], on_conflict: str) -> dict:
        builder = self._client.table(table).upsert(values, on_conflict=on_conflict)
        rows = await self._execute(builder, f"upsert {table}")
        return rows[0] if rows else values

    async def update(self, table: str, filters: Dict[str, Any], values: Dict[str, Any]) -> List[dict]:
        builder = self._filtered(self._client.table(table).update(values), filters)
        return await self._execute(builder, f"update {table}")

    async def delete(self, table: str, filters: Dict[str, Any]) -> int:
        """Returns the number of deleted rows."""
        builder = self._filtered(self._client.table(table).delete(), filters)
        rows = await self._execute(builder, f"delete {table}")
        return len(rows)


def get_store(request: Request) -> RecordStore:
    return request.app.state.store
