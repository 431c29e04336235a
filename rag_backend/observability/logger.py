"""
Root logging setup.

Every record is stamped with the request's correlation id, so log lines
from the router, the services and the store can be joined per request.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

from rag_backend.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(correlation_id)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access")


class CorrelationIdFilter(logging.Filter):
    """Sets ``record.correlation_id``; "-" outside a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stdout handler on the root logger.

    Safe to call repeatedly (application reloads, tests): previously
    installed handlers are dropped first.

    Args:
        level: Level name for the root logger; unknown names fall back to INFO
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
