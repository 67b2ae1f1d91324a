"""Base repository with generic bulk operations."""
from typing import Generic, Iterable, Type, TypeVar

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from sales_dashboard.models.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Generic repository providing bulk operations for any model.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    async def insert_many(self, objs: Iterable[T]) -> int:
        """Stage and flush new records. Returns the number inserted."""
        objs = list(objs)
        self.db.add_all(objs)
        await self.db.flush()
        return len(objs)

    async def delete_all(self) -> int:
        """Delete every row. Returns the number deleted."""
        result = await self.db.execute(delete(self.model))
        return result.rowcount or 0
