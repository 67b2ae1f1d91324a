"""Transaction model representing one catalog item observed in the sales feed."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sales_dashboard.models.base import Base


class Transaction(Base):
    """A sold or unsold product from the seeded dataset."""

    __tablename__ = "transactions"

    # Surrogate key; preserves insertion order.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    # Naive UTC.
    date_of_sale: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, index=True)
    sold: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    def __repr__(self) -> str:
        return f"<Transaction(product_id={self.product_id}, title={self.title!r}, price={self.price})>"
