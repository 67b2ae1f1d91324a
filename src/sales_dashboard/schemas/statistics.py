"""Pydantic schemas for the monthly aggregate endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class StatisticsResult(BaseModel):
    """Sale totals for one month."""

    model_config = ConfigDict(populate_by_name=True)

    total_sale_amount: float = Field(0, alias="totalSaleAmount")
    total_sold_items: int = Field(0, alias="totalSoldItems")
    total_not_sold_items: int = Field(0, alias="totalNotSoldItems")


class PriceRangeCount(BaseModel):
    """Bar chart entry: number of items in a price bucket."""

    range: str = Field(description="Bucket label, e.g. 101-200")
    count: int


class CategoryCount(BaseModel):
    """Pie chart entry: number of items in a category."""

    category: str
    count: int


class CombinedResult(BaseModel):
    """Statistics, bar chart and pie chart for the same month."""

    model_config = ConfigDict(populate_by_name=True)

    statistics: StatisticsResult
    bar_chart: list[PriceRangeCount] = Field(alias="barChart")
    pie_chart: list[CategoryCount] = Field(alias="pieChart")
