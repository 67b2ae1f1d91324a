"""Pydantic schemas for seed records and transaction API responses.

API payloads use the feed's camelCase field names (``productId``,
``dateOfSale``); Python code uses snake_case attributes.
"""

import math
from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class SeedRecord(BaseModel):
    """One record of the external seed dataset, coerced for storage."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: str = Field(
        validation_alias=AliasChoices("productId", "id", "product_id"),
        min_length=1,
    )
    title: str
    description: str
    price: float
    category: str
    date_of_sale: datetime = Field(
        validation_alias=AliasChoices("dateOfSale", "date_of_sale")
    )
    sold: bool = False
    image: str | None = None

    @field_validator("product_id", mode="before")
    @classmethod
    def _coerce_product_id(cls, value: Any) -> Any:
        # The public feed ships numeric ids.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("price")
    @classmethod
    def _check_price(cls, value: float) -> float:
        if not math.isfinite(value) or value < 0:
            raise ValueError("price must be a finite non-negative number")
        return value

    @field_validator("date_of_sale")
    @classmethod
    def _to_naive_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class TransactionResponse(BaseModel):
    """Transaction data for API responses."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    product_id: str = Field(alias="productId")
    title: str
    description: str
    price: float
    category: str
    date_of_sale: datetime = Field(alias="dateOfSale", description="Sale timestamp (UTC)")
    sold: bool = False
    image: str | None = None

    @field_validator("date_of_sale")
    @classmethod
    def _attach_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class TransactionListResult(BaseModel):
    """One page of month-filtered, searched transactions."""

    model_config = ConfigDict(populate_by_name=True)

    total: int = Field(description="Matches before pagination")
    page: int = Field(description="Page number (1-indexed)")
    per_page: int = Field(alias="perPage", description="Page size")
    transactions: list[TransactionResponse]


class InitResult(BaseModel):
    """Outcome of a reseed."""

    message: str
    count: int = Field(description="Number of records inserted")
