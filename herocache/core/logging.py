"""
Logging setup for the herocache service.

Call setup_logging() once, before the app is created. Modules log through
named loggers (logging.getLogger("PersistenceStore"), ...).
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Libraries that log every statement or request at INFO/DEBUG
NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx", "httpcore")


class SuppressHealthLogsFilter(logging.Filter):
    """Drop uvicorn access lines for the health endpoint."""

    def filter(self, record):
        return "/auth/health" not in record.getMessage()


def setup_logging(debug_mode: bool = False, log_level: Optional[int] = None) -> None:
    """
    Configure the root logger.

    Args:
        debug_mode: Log at DEBUG instead of INFO (ignored if log_level is given)
        log_level: Explicit level for herocache loggers
    """
    if log_level is None:
        log_level = logging.DEBUG if debug_mode else logging.INFO

    logging.basicConfig(level=log_level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", force=True)

    # Cache hits and misses stay readable at DEBUG without SQL and request dumps
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("uvicorn.access").addFilter(SuppressHealthLogsFilter())

    logging.getLogger("Logging").info(f"Logging configured with level: {logging.getLevelName(log_level)}")
