"""
Logging setup shared by the API process and the init_db script.
"""

import logging
import sys

from portfolio_api.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEVELOPMENT_LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"

# Third-party loggers held at a fixed level regardless of LOG_LEVEL
LIBRARY_LEVELS = {
    "uvicorn": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "asyncpg": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "slowapi": logging.WARNING,
}

_configured = False


def log_format(environment: str) -> str:
    """Development output carries the source line of each record."""
    return DEVELOPMENT_LOG_FORMAT if environment == "development" else LOG_FORMAT


def access_log_level(environment: str) -> int:
    """uvicorn logs every request in development only."""
    return logging.INFO if environment == "development" else logging.WARNING


def setup_logging(force: bool = False) -> None:
    """
    Send log records to stdout using the format for the current environment.

    Runs once per process; later calls are ignored unless ``force`` is set.
    """
    global _configured
    if _configured and not force:
        return

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format=log_format(settings.ENVIRONMENT),
        handlers=[logging.StreamHandler(sys.stdout)],
        force=force,
    )
    for name, level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(access_log_level(settings.ENVIRONMENT))

    _configured = True
    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"environment": settings.ENVIRONMENT, "level": settings.LOG_LEVEL.upper()},
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(name)
