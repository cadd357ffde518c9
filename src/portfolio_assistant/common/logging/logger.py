# shared service logger
# NOTE: import `logger` from here everywhere instead of calling logging.getLogger per module

import logging
import os
import sys

LOGGER_NAME = "portfolio_assistant"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(module)s:%(lineno)d | %(message)s"

def _build_logger() -> logging.Logger:
    """
    Builds the service-wide logger with a single stream handler.
    Level is read from LOG_LEVEL (defaults to INFO) since settings depend on the logger themselves.
    """
    service_logger = logging.getLogger(LOGGER_NAME)
    # avoid stacking handlers when the module is re-imported (e.g. uvicorn --reload)
    if not service_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        service_logger.addHandler(handler)

    service_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    service_logger.propagate = False
    return service_logger

logger = _build_logger()
