"""
Logging configuration for the demo API.

Library modules only call logging.getLogger(__name__); this dictConfig is
applied by token_session.main and keeps uvicorn's /health checks out of the
access log.
"""

import logging
import logging.config
from typing import Any, Dict


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access records for GET /health."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        message = record.getMessage()
        return not ("GET" in message and "/health" in message)


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """
    Build the dictConfig for the demo API.

    Args:
        level: Level for token_session loggers; uvicorn stays at INFO
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"health_check_filter": {"()": HealthCheckFilter}},
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"],
            },
        },
        "loggers": {
            "token_session": {"level": level},
            "uvicorn": {"level": "INFO"},
        },
        "root": {"level": "INFO", "handlers": ["default"]},
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the demo API logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
