"""Custom exception classes for the transaction query engine.

Each exception maps to an error code defined in errors.py. Client input
errors carry HTTP 400, downstream failures HTTP 500.
"""

from typing import Any


class SalesDashboardError(Exception):
    """Base exception for all engine errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "MONTH_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    default_code = "SYS_001"
    default_status = 500

    def __init__(
        self,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        self.error_code = error_code or self.default_code
        self.details = details or {}
        self.http_status = http_status or self.default_status
        super().__init__(self.error_code)


class MissingMonth(SalesDashboardError):
    """Raised when a read operation is called without a month."""

    default_code = "MONTH_001"
    default_status = 400


class InvalidMonth(SalesDashboardError):
    """Raised when a month designator matches neither 1-12 nor a month name."""

    default_code = "MONTH_002"
    default_status = 400


class SourceUnavailable(SalesDashboardError):
    """Raised when the seed source cannot be fetched.

    Covers connection failures, timeouts and non-2xx responses.
    """

    default_code = "SEED_001"


class SeedParseError(SalesDashboardError):
    """Raised when the seed payload is not an array of valid records."""

    default_code = "SEED_002"


class StoreError(SalesDashboardError):
    """Raised when the underlying database rejects or fails an operation."""

    default_code = "DB_001"
