"""Global error handling.

All exceptions are caught and converted to a JSON body of the form
``{"error": <message>, "error_code": <code>}``: 400 for client input
errors, 500 for downstream failures.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from sales_dashboard.config import settings
from sales_dashboard.core.errors import get_user_message
from sales_dashboard.core.exceptions import SalesDashboardError

logger = logging.getLogger(__name__)


def error_response(status_code: int, error_code: str, message: str | None = None) -> JSONResponse:
    """Build the standard error body."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message or get_user_message(error_code),
            "error_code": error_code,
        },
    )


async def handle_sales_dashboard_error(
    request: Request, exc: SalesDashboardError
) -> JSONResponse:
    """Handle engine exceptions using the error catalog.

    Args:
        request: The incoming request
        exc: The engine exception

    Returns:
        JSONResponse with the catalog message and the exception's status
    """
    extra = {"error_code": exc.error_code, "path": request.url.path, "method": request.method}
    if settings.debug:
        extra["details"] = exc.details

    if exc.http_status >= 500:
        logger.error(f"Request failed: {exc.error_code}", extra=extra)
    else:
        logger.warning(f"Rejected request: {exc.error_code}", extra=extra)

    return error_response(exc.http_status, exc.error_code)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed query parameters (e.g. ``page=abc``).

    Args:
        request: The incoming request
        exc: The validation error

    Returns:
        JSONResponse (400) naming the offending fields
    """
    error_messages = []
    for error in exc.errors():
        field = ".".join(str(x) for x in error.get("loc", []))
        msg = error.get("msg", "Invalid value")
        error_messages.append(f"{field}: {msg}")

    logger.warning(
        f"Validation error on {request.url.path}",
        extra={"path": request.url.path, "method": request.method},
    )

    return error_response(
        status.HTTP_400_BAD_REQUEST, "VAL_001", " | ".join(error_messages) or None
    )


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle database errors that escaped the service layer.

    Args:
        request: The incoming request
        exc: The SQLAlchemy error

    Returns:
        JSONResponse (500) with a generic database message
    """
    # str(exc) can include SQL and bound parameters.
    logger.error(
        f"Database error on {request.url.path}",
        exc_info=exc if settings.debug else None,
        extra={"path": request.url.path, "method": request.method},
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "DB_001")


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internals.

    Args:
        request: The incoming request
        exc: The unexpected exception

    Returns:
        JSONResponse (500) with a generic message
    """
    logger.error(
        f"Unexpected error on {request.url.path}",
        exc_info=exc if settings.debug else None,
        extra={
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        },
    )
    response = error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "SYS_001")
    # Served outside RequestLoggingMiddleware.
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers["X-Request-ID"] = request_id
    return response


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle routing errors (unknown path, unsupported method)."""
    logger.warning(
        f"HTTP {exc.status_code} on {request.url.path}",
        extra={"path": request.url.path, "method": request.method, "status_code": exc.status_code},
    )
    response = error_response(exc.status_code, f"HTTP_{exc.status_code}", str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response
