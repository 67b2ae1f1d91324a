"""API routes."""

from fastapi import APIRouter

from sales_dashboard.api.v1 import transactions

router = APIRouter(prefix="/api")

router.include_router(transactions.router)
