"""
structlog setup shared by the API and the scripts.

Every event carries the service name, the log level and a UTC timestamp, plus
whatever is bound in structlog.contextvars for the current request
(request_id, method, path from RequestIDMiddleware).

LOG_FORMAT picks the renderer: "json" for log shipping, "console" for local
work. It defaults to json at INFO and above and to console at DEBUG.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping

import structlog

from hotel_reservations.config import LOG_FORMAT, LOG_LEVEL, SERVICE_NAME

# Chatty at INFO; only their warnings are useful here
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "uvicorn.access", "httpx")


def add_service_name(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def build_renderer(log_format: str) -> Any:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer(sort_keys=True)


def setup_logging() -> None:
    """
    Configure stdlib logging and structlog for the whole process.
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=LOG_LEVEL,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if LOG_FORMAT == "json":
        # Console rendering prints tracebacks itself
        processors.append(structlog.processors.format_exc_info)
    processors.append(build_renderer(LOG_FORMAT))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(LOG_LEVEL)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
