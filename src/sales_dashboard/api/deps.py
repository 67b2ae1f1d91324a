"""FastAPI dependency injection for services and the seed source."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sales_dashboard.db.session import get_db
from sales_dashboard.services.seed_source import SeedSourceClient
from sales_dashboard.services.transaction import TransactionService


async def get_transaction_service(
    db: AsyncSession = Depends(get_db),
) -> TransactionService:
    """
    Get transaction service instance.

    Args:
        db: Database session

    Returns:
        TransactionService instance
    """
    return TransactionService(db)


async def get_seed_source() -> SeedSourceClient:
    """Get a seed source client configured from settings."""
    return SeedSourceClient()
