"""Root logging configuration for the API process."""

import logging
import logging.config

from sales_dashboard.config import settings


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Configure root logging.

    Args:
        level: Logging level name; defaults to ``settings.log_level``
        json_logs: Emit JSON lines instead of the console format;
            defaults to ``settings.log_json``
    """
    level = (level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.log_json

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {
                    "()": "sales_dashboard.api.middleware.logging.JSONLogFormatter",
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if json_logs else "console",
                },
            },
            "root": {"level": level, "handlers": ["default"]},
        }
    )
