"""Database models."""
from sales_dashboard.models.base import Base
from sales_dashboard.models.transaction import Transaction

__all__ = ["Base", "Transaction"]
