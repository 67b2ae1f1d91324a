"""Transaction repository with month filtering and aggregation queries."""
import math

from sqlalchemy import ColumnElement, case, extract, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from sales_dashboard.core.buckets import PRICE_BUCKETS
from sales_dashboard.models.transaction import Transaction
from sales_dashboard.repositories.base import BaseRepository


def month_filter(month: int) -> ColumnElement[bool]:
    """Match records sold in ``month`` of any year."""
    return extract("month", Transaction.date_of_sale) == month


def parse_search_number(search: str) -> float | None:
    """Return ``search`` as a finite number, or None if it is not numeric."""
    value = search.strip()
    if not value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_filter(search: str) -> ColumnElement[bool] | None:
    """Case-insensitive title/description substring match, or price equality.

    Returns None for an empty search, which matches everything.
    """
    if not search:
        return None

    pattern = f"%{_escape_like(search)}%"
    clauses = [
        Transaction.title.ilike(pattern, escape="\\"),
        Transaction.description.ilike(pattern, escape="\\"),
    ]
    number = parse_search_number(search)
    if number is not None:
        clauses.append(Transaction.price == number)
    return or_(*clauses)


def price_bucket_label() -> ColumnElement[str]:
    """SQL expression mapping ``price`` to its bucket label."""
    *bounded, last = PRICE_BUCKETS
    return case(
        *[(Transaction.price < bucket.upper, bucket.label) for bucket in bounded],
        else_=last.label,
    )


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model with filtering and analytics queries."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def find_by_month(
        self, month: int, search: str = "", skip: int = 0, limit: int = 10
    ) -> list[Transaction]:
        """Get one page of a month's transactions matching ``search``."""
        query = select(Transaction).where(month_filter(month))
        text_clause = search_filter(search)
        if text_clause is not None:
            query = query.where(text_clause)

        result = await self.db.execute(
            query.order_by(Transaction.id.asc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_month(self, month: int, search: str = "") -> int:
        """Count a month's transactions matching ``search``."""
        query = select(func.count(Transaction.id)).where(month_filter(month))
        text_clause = search_filter(search)
        if text_clause is not None:
            query = query.where(text_clause)

        result = await self.db.execute(query)
        return result.scalar_one()

    async def get_sale_totals(self, month: int) -> tuple[float, int, int]:
        """
        Aggregate a month's sale amount and sold/unsold counts.
        Returns (total_amount, sold_count, not_sold_count).
        """
        result = await self.db.execute(
            select(
                func.coalesce(func.sum(Transaction.price), 0).label("total"),
                func.coalesce(
                    func.sum(case((Transaction.sold.is_(True), 1), else_=0)), 0
                ).label("sold"),
                func.coalesce(
                    func.sum(case((Transaction.sold.is_(True), 0), else_=1)), 0
                ).label("not_sold"),
            ).where(month_filter(month))
        )
        row = result.one()
        return float(row.total), int(row.sold), int(row.not_sold)

    async def get_price_bucket_counts(self, month: int) -> dict[str, int]:
        """
        Count a month's transactions per price bucket.
        Returns dict of {bucket_label: count} for non-empty buckets only.
        """
        bucketed = (
            select(price_bucket_label().label("price_range"))
            .where(month_filter(month))
            .subquery()
        )
        result = await self.db.execute(
            select(bucketed.c.price_range, func.count().label("item_count")).group_by(
                bucketed.c.price_range
            )
        )
        return {row.price_range: int(row.item_count) for row in result}

    async def get_category_counts(self, month: int) -> dict[str, int]:
        """
        Count a month's transactions per category.
        Returns dict of {category: count}, ordered by category.
        """
        result = await self.db.execute(
            select(Transaction.category, func.count(Transaction.id).label("item_count"))
            .where(month_filter(month))
            .group_by(Transaction.category)
            .order_by(Transaction.category.asc())
        )
        return {row.category: int(row.item_count) for row in result}
