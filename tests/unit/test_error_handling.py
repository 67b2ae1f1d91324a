"""Unit tests for error handlers and JSON log formatting."""

import json
import logging
from unittest.mock import Mock

import pytest
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from sales_dashboard.api.middleware.error_handler import (
    handle_database_error,
    handle_generic_error,
    handle_http_error,
    handle_sales_dashboard_error,
    handle_validation_error,
)
from sales_dashboard.api.middleware.logging import JSONLogFormatter
from sales_dashboard.core.errors import ERROR_CATALOG, get_error
from sales_dashboard.core.exceptions import (
    InvalidMonth,
    MissingMonth,
    SalesDashboardError,
    SeedParseError,
    SourceUnavailable,
    StoreError,
)


def _request(path: str = "/api/transactions", method: str = "GET") -> Mock:
    request = Mock(spec=Request)
    request.url.path = path
    request.method = method
    request.state.request_id = "req-1"
    return request


class TestExceptionHierarchy:
    """Test exception defaults map onto the catalog."""

    @pytest.mark.parametrize(
        "exc_class, code, status",
        [
            (MissingMonth, "MONTH_001", 400),
            (InvalidMonth, "MONTH_002", 400),
            (SourceUnavailable, "SEED_001", 500),
            (SeedParseError, "SEED_002", 500),
            (StoreError, "DB_001", 500),
        ],
    )
    def test_defaults(self, exc_class, code, status):
        exc = exc_class()
        assert isinstance(exc, SalesDashboardError)
        assert exc.error_code == code
        assert exc.http_status == status
        assert code in ERROR_CATALOG

    def test_unknown_code_resolves_to_generic_definition(self):
        assert get_error("NOPE_999")["code"] == "UNKNOWN"


class TestSalesDashboardErrorHandler:
    """Test custom exception handling."""

    async def test_missing_month_is_400(self):
        response = await handle_sales_dashboard_error(_request(), MissingMonth())

        assert response.status_code == 400
        content = json.loads(response.body.decode())
        assert content == {"error": "Month parameter is required.", "error_code": "MONTH_001"}

    async def test_invalid_month_is_400(self):
        response = await handle_sales_dashboard_error(
            _request(), InvalidMonth(details={"month": "Smarch"})
        )

        assert response.status_code == 400
        content = json.loads(response.body.decode())
        assert content["error_code"] == "MONTH_002"
        assert content["error"] == "Invalid month name."

    async def test_source_unavailable_is_500(self):
        response = await handle_sales_dashboard_error(
            _request("/api/transactions/init", "POST"), SourceUnavailable()
        )

        assert response.status_code == 500
        content = json.loads(response.body.decode())
        assert content["error_code"] == "SEED_001"

    async def test_details_not_exposed(self):
        exc = StoreError(details={"dsn": "postgresql://user:secret@db/sales"})
        response = await handle_sales_dashboard_error(_request(), exc)

        assert "secret" not in response.body.decode()


class TestValidationErrorHandler:
    """Test validation error handling."""

    async def test_handle_validation_error(self):
        exc = RequestValidationError(
            errors=[
                {
                    "loc": ("query", "perPage"),
                    "msg": "Input should be less than or equal to 100",
                    "type": "less_than_equal",
                }
            ]
        )

        response = await handle_validation_error(_request(), exc)

        assert response.status_code == 400
        content = json.loads(response.body.decode())
        assert content["error_code"] == "VAL_001"
        assert "perPage" in content["error"]

    async def test_validation_error_multiple_fields(self):
        exc = RequestValidationError(
            errors=[
                {"loc": ("query", "page"), "msg": "not an int", "type": "int_parsing"},
                {"loc": ("query", "perPage"), "msg": "too small", "type": "greater_than_equal"},
            ]
        )

        response = await handle_validation_error(_request(), exc)

        content = json.loads(response.body.decode())
        assert "page" in content["error"]
        assert "perPage" in content["error"]


class TestDatabaseErrorHandler:
    """Test database error handling."""

    async def test_integrity_error_is_500(self):
        exc = IntegrityError("INSERT INTO transactions", {"product_id": "1"}, Exception("UNIQUE"))

        response = await handle_database_error(_request(), exc)

        assert response.status_code == 500
        content = json.loads(response.body.decode())
        assert content["error_code"] == "DB_001"
        assert "INSERT" not in content["error"]

    async def test_operational_error_is_500(self):
        exc = OperationalError("SELECT 1", {}, Exception("connection refused"))

        response = await handle_database_error(_request(), exc)

        assert response.status_code == 500


class TestGenericErrorHandler:
    """Test generic exception handling."""

    async def test_handle_generic_error(self):
        exc = Exception("Database connection failed: host=localhost port=5432")

        response = await handle_generic_error(_request(), exc)

        assert response.status_code == 500
        content = json.loads(response.body.decode())
        assert content["error_code"] == "SYS_001"
        assert "localhost" not in content["error"]
        assert "5432" not in content["error"]
        assert response.headers["X-Request-ID"] == "req-1"


class TestHTTPErrorHandler:
    """Test routing error handling."""

    async def test_not_found_uses_error_body(self):
        response = await handle_http_error(_request("/nope"), StarletteHTTPException(status_code=404))

        assert response.status_code == 404
        content = json.loads(response.body.decode())
        assert content == {"error": "Not Found", "error_code": "HTTP_404"}

    async def test_headers_are_kept(self):
        exc = StarletteHTTPException(status_code=405, headers={"Allow": "GET"})

        response = await handle_http_error(_request(method="DELETE"), exc)

        assert response.status_code == 405
        assert response.headers["Allow"] == "GET"
        assert json.loads(response.body.decode())["error_code"] == "HTTP_405"


class TestLoggingBehavior:
    """Test logging behavior of error handlers."""

    async def test_server_errors_logged_at_error(self, caplog):
        with caplog.at_level(logging.ERROR):
            await handle_sales_dashboard_error(_request(), SourceUnavailable())

        assert "SEED_001" in caplog.text
        assert any(record.levelno == logging.ERROR for record in caplog.records)

    async def test_client_errors_logged_as_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            await handle_sales_dashboard_error(_request(), InvalidMonth())

        assert "MONTH_002" in caplog.text
        assert all(record.levelno == logging.WARNING for record in caplog.records)


class TestJSONLogFormatter:
    """Test structured log output."""

    def test_includes_extra_fields(self):
        record = logging.LogRecord(
            name="sales_dashboard.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Request completed",
            args=(),
            exc_info=None,
        )
        record.request_id = "abc-123"
        record.status_code = 200

        payload = json.loads(JSONLogFormatter().format(record))

        assert payload["message"] == "Request completed"
        assert payload["level"] == "INFO"
        assert payload["request_id"] == "abc-123"
        assert payload["status_code"] == 200
        assert "duration_ms" not in payload
