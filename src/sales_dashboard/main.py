import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from sales_dashboard.api.middleware.error_handler import (
    handle_database_error,
    handle_generic_error,
    handle_http_error,
    handle_sales_dashboard_error,
    handle_validation_error,
)
from sales_dashboard.api.middleware.logging import RequestLoggingMiddleware
from sales_dashboard.api.v1 import router as api_router
from sales_dashboard.api.v1.health import router as health_router
from sales_dashboard.config import settings
from sales_dashboard.core.exceptions import SalesDashboardError
from sales_dashboard.core.logging import configure_logging
from sales_dashboard.db.session import init_models

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.create_tables_on_startup:
        await init_models()
        logger.info("Database tables ready")
    yield
    # Shutdown


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Sales Dashboard API",
        description="Monthly sales listing, statistics and charts over a seeded product feed",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(SalesDashboardError, handle_sales_dashboard_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(api_router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("sales_dashboard.main:app", host=settings.host, port=settings.port)
