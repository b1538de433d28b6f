"""Logging setup shared by the API server and the maintenance CLI."""

import copy
import logging
from typing import Any

import structlog
from uvicorn.config import LOGGING_CONFIG

# Client libraries that log every connection and command at DEBUG
QUIET_LOGGERS = ("redis", "redis.asyncio", "redis.connection")


def setup_logging(debug: bool) -> None:
    """Route structlog through stdlib logging: console output in debug, JSON lines otherwise."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format="%(message)s")
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def uvicorn_log_config(debug: bool) -> dict[str, Any]:
    """Uvicorn's own logging config with terser formats; per-request access lines only in debug."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    if not debug:
        log_config["loggers"]["uvicorn.access"]["level"] = "WARNING"
    return log_config
