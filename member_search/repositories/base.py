from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Mapping, Optional

from sqlalchemy import Executable, Result
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeout
from sqlalchemy.ext.asyncio import AsyncSession

from member_search.core.errors import StoreUnavailable, translate_db_error


@asynccontextmanager
async def translated_errors() -> AsyncIterator[None]:
    """Re-raise SQLAlchemy and socket errors as QueryError or StoreUnavailable."""
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        raise translate_db_error(exc) from exc


class BaseRepository:
    """
    Shared plumbing for repositories over one AsyncSession.

    Statements and commits go through here so callers only ever see the
    member_search error taxonomy.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _acquire_connection(self) -> None:
        # Any failure to open a connection is unavailability, whatever the driver reports.
        try:
            await self.session.connection()
        except (DBAPIError, PoolTimeout, OSError) as exc:
            raise StoreUnavailable(f"Database unavailable: {exc}") from exc

    async def execute(self, statement: Executable, params: Optional[Mapping[str, Any]] = None) -> Result:
        await self._acquire_connection()
        async with translated_errors():
            return await self.session.execute(statement, params or {})

    async def scalars(self, statement: Executable) -> List[Any]:
        """All rows' first column, as a list."""
        result = await self.execute(statement)
        return list(result.scalars())

    async def scalar_one(self, statement: Executable) -> Any:
        result = await self.execute(statement)
        return result.scalar_one()

    async def scalar_one_or_none(self, statement: Executable) -> Any:
        result = await self.execute(statement)
        return result.scalar_one_or_none()

    def add(self, entity: Any) -> None:
        self.session.add(entity)

    async def commit(self) -> None:
        """Commit; on failure the transaction is rolled back before the error propagates."""
        try:
            async with translated_errors():
                await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
