"""Error codes and user-facing messages.

Each catalog entry has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: Text returned to API clients in the ``error`` field
"""

ERROR_CATALOG: dict[str, dict] = {
    "MONTH_001": {
        "code": "MONTH_001",
        "message": "Month query parameter missing",
        "user_message": "Month parameter is required.",
    },
    "MONTH_002": {
        "code": "MONTH_002",
        "message": "Month designator is neither 1-12 nor an English month name",
        "user_message": "Invalid month name.",
    },
    "SEED_001": {
        "code": "SEED_001",
        "message": "Seed source could not be fetched",
        "user_message": "Failed to initialize database: seed source unavailable.",
    },
    "SEED_002": {
        "code": "SEED_002",
        "message": "Seed payload is not a well-formed array of transaction records",
        "user_message": "Failed to initialize database: seed data is malformed.",
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "A database error occurred.",
    },
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request parameters failed validation",
        "user_message": "Invalid request parameters.",
    },
    "HTTP_404": {
        "code": "HTTP_404",
        "message": "No route matches the request path",
        "user_message": "Not Found",
    },
    "HTTP_405": {
        "code": "HTTP_405",
        "message": "Route does not accept the request method",
        "user_message": "Method Not Allowed",
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred.",
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Unknown codes resolve to a generic definition instead of raising.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get the client-facing message for an error code."""
    return get_error(error_code)["user_message"]
