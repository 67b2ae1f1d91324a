"""Client for the external JSON dataset used to reseed the store.

Transport failures are retried with exponential backoff (tenacity);
HTTP error statuses and malformed payloads are not.
"""

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from sales_dashboard.config import settings
from sales_dashboard.core.exceptions import SeedParseError, SourceUnavailable
from sales_dashboard.schemas.transaction import SeedRecord

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(list[SeedRecord])


def parse_seed_payload(payload: Any) -> list[SeedRecord]:
    """Validate a decoded JSON payload into seed records.

    Args:
        payload: Decoded JSON document

    Returns:
        Records in payload order

    Raises:
        SeedParseError: If the payload is not an array of valid records,
            or two records share a productId
    """
    if not isinstance(payload, list):
        raise SeedParseError(details={"reason": f"expected array, got {type(payload).__name__}"})

    try:
        records = _records_adapter.validate_python(payload)
    except ValidationError as e:
        raise SeedParseError(
            details={"reason": "invalid record", "errors": e.error_count()}
        ) from e

    seen: set[str] = set()
    for record in records:
        if record.product_id in seen:
            raise SeedParseError(
                details={"reason": "duplicate productId", "product_id": record.product_id}
            )
        seen.add(record.product_id)

    return records


class SeedSourceClient:
    """Fetches and validates the seed dataset over HTTP."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        retry_attempts: int | None = None,
        retry_wait_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            url: Dataset URL (default: settings.seed_source_url)
            timeout: Per-request timeout in seconds
            retry_attempts: Total attempts for transport failures
            retry_wait_seconds: Base for the exponential backoff
            transport: Optional httpx transport (used by tests)
        """
        self.url = url or settings.seed_source_url
        self.timeout = timeout if timeout is not None else settings.seed_timeout_seconds
        self.retry_attempts = max(1, retry_attempts or settings.seed_retry_attempts)
        self.retry_wait_seconds = retry_wait_seconds
        self.transport = transport

    async def fetch(self) -> list[SeedRecord]:
        """Download and validate the dataset.

        Raises:
            SourceUnavailable: On transport failure, timeout or error status
            SeedParseError: If the body is not a valid record array
        """
        response = await self._get()

        try:
            payload = response.json()
        except ValueError as e:
            raise SeedParseError(details={"reason": "body is not JSON"}) from e

        records = parse_seed_payload(payload)
        logger.info("Fetched seed data", extra={"count": len(records), "source_url": self.url})
        return records

    async def _get(self) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(self.retry_attempts),
                    wait=wait_exponential(
                        multiplier=self.retry_wait_seconds,
                        min=0,
                        max=10 * self.retry_wait_seconds,
                    ),
                    retry=retry_if_exception_type(httpx.TransportError),
                    reraise=True,
                ):
                    with attempt:
                        response = await client.get(self.url)
                response.raise_for_status()
            except httpx.TransportError as e:
                logger.error(
                    "Seed source unreachable",
                    extra={"source_url": self.url, "error_type": type(e).__name__},
                )
                raise SourceUnavailable(details={"error": type(e).__name__}) from e
            except httpx.HTTPStatusError as e:
                logger.error(
                    "Seed source returned an error status",
                    extra={"source_url": self.url, "status_code": e.response.status_code},
                )
                raise SourceUnavailable(details={"status_code": e.response.status_code}) from e

        return response
