"""Transaction seeding, listing and monthly aggregate endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from sales_dashboard.api.deps import get_seed_source, get_transaction_service
from sales_dashboard.config import settings
from sales_dashboard.schemas.statistics import (
    CategoryCount,
    CombinedResult,
    PriceRangeCount,
    StatisticsResult,
)
from sales_dashboard.schemas.transaction import InitResult, TransactionListResult
from sales_dashboard.services.seed_source import SeedSourceClient
from sales_dashboard.services.transaction import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])

MonthQuery = Annotated[
    str | None,
    Query(description="Month number (1-12) or English month name, any year"),
]


@router.get("/init", response_model=InitResult, include_in_schema=False)
@router.post(
    "/init",
    response_model=InitResult,
    summary="Reseed the database from the remote dataset",
    description="""
    Fetches the configured JSON dataset and replaces **all** stored
    transactions with it. The replacement is irreversible.
    """,
)
async def init_database(
    service: TransactionService = Depends(get_transaction_service),
    source: SeedSourceClient = Depends(get_seed_source),
) -> InitResult:
    return await service.reseed(source)


@router.get(
    "",
    response_model=TransactionListResult,
    summary="List transactions for a month",
    description="""
    List a month's transactions (any year) with search and pagination.

    ## Filters
    - **month**: Required. Number (1-12) or month name
    - **search**: Case-insensitive match on title or description; a numeric
      search also matches the exact price

    Results are returned in feed order.
    """,
)
async def list_transactions(
    month: MonthQuery = None,
    search: Annotated[str, Query(description="Title/description text or exact price")] = "",
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    per_page: Annotated[
        int,
        Query(
            alias="perPage",
            ge=1,
            description="Items per page",
        ),
    ] = settings.default_per_page,
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResult:
    return await service.list_transactions(month, search, page, per_page)


@router.get(
    "/statistics",
    response_model=StatisticsResult,
    summary="Sale totals for a month",
)
async def get_statistics(
    month: MonthQuery = None,
    service: TransactionService = Depends(get_transaction_service),
) -> StatisticsResult:
    """Total sale amount plus sold and unsold item counts."""
    return await service.get_statistics(month)


@router.get(
    "/bar-chart",
    response_model=list[PriceRangeCount],
    summary="Price range histogram for a month",
)
async def get_bar_chart(
    month: MonthQuery = None,
    service: TransactionService = Depends(get_transaction_service),
) -> list[PriceRangeCount]:
    """All ten price ranges, empty ones included, in ascending price order."""
    return await service.get_bar_chart(month)


@router.get(
    "/pie-chart",
    response_model=list[CategoryCount],
    summary="Item count per category for a month",
)
async def get_pie_chart(
    month: MonthQuery = None,
    service: TransactionService = Depends(get_transaction_service),
) -> list[CategoryCount]:
    return await service.get_pie_chart(month)


@router.get(
    "/combined",
    response_model=CombinedResult,
    summary="Statistics, bar chart and pie chart for a month",
)
async def get_combined(
    month: MonthQuery = None,
    service: TransactionService = Depends(get_transaction_service),
) -> CombinedResult:
    return await service.get_combined(month)
