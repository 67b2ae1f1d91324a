"""Price buckets for the bar chart histogram."""

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True)
class PriceBucket:
    """Half-open price range ``[lower, upper)``; ``upper`` None means unbounded."""

    lower: float
    upper: float | None
    label: str


# Ordered by lower bound. Labels are inclusive integer ranges.
PRICE_BUCKETS: tuple[PriceBucket, ...] = (
    PriceBucket(0, 101, "0-100"),
    PriceBucket(101, 201, "101-200"),
    PriceBucket(201, 301, "201-300"),
    PriceBucket(301, 401, "301-400"),
    PriceBucket(401, 501, "401-500"),
    PriceBucket(501, 601, "501-600"),
    PriceBucket(601, 701, "601-700"),
    PriceBucket(701, 801, "701-800"),
    PriceBucket(801, 901, "801-900"),
    PriceBucket(901, None, "901-above"),
)

_LOWER_BOUNDS = [bucket.lower for bucket in PRICE_BUCKETS]


def bucket_for(price: float) -> PriceBucket:
    """Return the bucket a non-negative price falls into."""
    if price < 0:
        raise ValueError(f"price must be non-negative, got {price}")
    return PRICE_BUCKETS[bisect_right(_LOWER_BOUNDS, price) - 1]


def empty_histogram() -> dict[str, int]:
    """Zero count for every bucket label, in bucket order."""
    return {bucket.label: 0 for bucket in PRICE_BUCKETS}
