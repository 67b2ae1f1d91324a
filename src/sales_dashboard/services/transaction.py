"""Transaction query engine.

Every read operation resolves its month designator first, then delegates
filtering and aggregation to the TransactionRepository. Store failures
surface as StoreError.
"""

import logging
from typing import Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sales_dashboard.core.buckets import PRICE_BUCKETS, empty_histogram
from sales_dashboard.core.exceptions import StoreError
from sales_dashboard.core.months import resolve_month
from sales_dashboard.models.transaction import Transaction
from sales_dashboard.repositories.transaction import TransactionRepository
from sales_dashboard.schemas.statistics import (
    CategoryCount,
    CombinedResult,
    PriceRangeCount,
    StatisticsResult,
)
from sales_dashboard.schemas.transaction import (
    InitResult,
    TransactionListResult,
    TransactionResponse,
)
from sales_dashboard.services.seed_source import SeedSourceClient

logger = logging.getLogger(__name__)

MonthDesignator = Union[int, str, None]

INIT_MESSAGE = "Database initialized with seed data."


class TransactionService:
    """Service answering month-scoped transaction queries.

    This service owns no state beyond its repository; the session is
    injected per request.
    """

    def __init__(self, db: AsyncSession):
        """Initialize the service.

        Args:
            db: Database session for queries and the reseed transaction
        """
        self.db = db
        self.transaction_repo = TransactionRepository(db)

    async def reseed(self, source: SeedSourceClient) -> InitResult:
        """Replace every stored transaction with the source's dataset.

        The source is fully fetched and validated before anything is
        deleted; delete and insert commit together.

        Args:
            source: Client for the external dataset

        Returns:
            InitResult with the number of inserted records

        Raises:
            SourceUnavailable: If the dataset cannot be fetched
            SeedParseError: If the dataset is malformed
            StoreError: If the replacement fails (nothing is changed)
        """
        records = await source.fetch()

        try:
            deleted = await self.transaction_repo.delete_all()
            inserted = await self.transaction_repo.insert_many(
                Transaction(**record.model_dump()) for record in records
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Reseed failed, rolled back", extra={"error_type": type(e).__name__})
            raise StoreError(details={"operation": "reseed"}) from e

        logger.info(
            f"Reseeded transactions: {deleted} removed, {inserted} inserted",
            extra={"count": inserted},
        )
        return InitResult(message=INIT_MESSAGE, count=inserted)

    async def list_transactions(
        self,
        month: MonthDesignator,
        search: str = "",
        page: int = 1,
        per_page: int = 10,
    ) -> TransactionListResult:
        """List one page of a month's transactions matching ``search``.

        Args:
            month: Month number or English month name
            search: Substring of title/description, or an exact price
            page: Page number (1-indexed)
            per_page: Page size

        Returns:
            Page of transactions with the unpaginated match count
        """
        month_number = resolve_month(month)
        search = search or ""
        skip = (page - 1) * per_page

        try:
            total = await self.transaction_repo.count_by_month(month_number, search)
            transactions = []
            if skip < total:
                # Both bounds stay below total, so they fit the driver's integer type.
                transactions = await self.transaction_repo.find_by_month(
                    month_number, search, skip=skip, limit=min(per_page, total - skip)
                )
        except SQLAlchemyError as e:
            raise StoreError(details={"operation": "list"}) from e

        return TransactionListResult(
            total=total,
            page=page,
            per_page=per_page,
            transactions=[TransactionResponse.model_validate(txn) for txn in transactions],
        )

    async def get_statistics(self, month: MonthDesignator) -> StatisticsResult:
        """Total sale amount and sold/unsold item counts for a month."""
        return await self._statistics(resolve_month(month))

    async def get_bar_chart(self, month: MonthDesignator) -> list[PriceRangeCount]:
        """Item counts for all ten price buckets, in ascending price order."""
        return await self._bar_chart(resolve_month(month))

    async def get_pie_chart(self, month: MonthDesignator) -> list[CategoryCount]:
        """Item counts for each category present in a month."""
        return await self._pie_chart(resolve_month(month))

    async def get_combined(self, month: MonthDesignator) -> CombinedResult:
        """Statistics, bar chart and pie chart for one month.

        All three read the same session; any failure fails the whole call.
        """
        month_number = resolve_month(month)
        return CombinedResult(
            statistics=await self._statistics(month_number),
            bar_chart=await self._bar_chart(month_number),
            pie_chart=await self._pie_chart(month_number),
        )

    async def _statistics(self, month: int) -> StatisticsResult:
        try:
            total, sold, not_sold = await self.transaction_repo.get_sale_totals(month)
        except SQLAlchemyError as e:
            raise StoreError(details={"operation": "statistics"}) from e

        return StatisticsResult(
            total_sale_amount=total,
            total_sold_items=sold,
            total_not_sold_items=not_sold,
        )

    async def _bar_chart(self, month: int) -> list[PriceRangeCount]:
        try:
            counts = await self.transaction_repo.get_price_bucket_counts(month)
        except SQLAlchemyError as e:
            raise StoreError(details={"operation": "bar_chart"}) from e

        histogram = empty_histogram()
        histogram.update(counts)
        return [
            PriceRangeCount(range=bucket.label, count=histogram[bucket.label])
            for bucket in PRICE_BUCKETS
        ]

    async def _pie_chart(self, month: int) -> list[CategoryCount]:
        try:
            counts = await self.transaction_repo.get_category_counts(month)
        except SQLAlchemyError as e:
            raise StoreError(details={"operation": "pie_chart"}) from e

        return [CategoryCount(category=category, count=count) for category, count in counts.items()]
