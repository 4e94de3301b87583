"""Structured logging configuration.

Outputs either JSON (production) or console format (development) through
structlog, on top of the standard library logging module.

Usage:
    from resource_tracker.logging_config import get_logger, setup_logging

    setup_logging()  # Uses settings defaults for format/level
    logger = get_logger(__name__)
    logger.info("event_name", key1=value1, key2=value2)
"""
import logging
import sys
from typing import Optional

import structlog

from resource_tracker.config import settings


def setup_logging(
    service_name: Optional[str] = None,
    log_format: Optional[str] = None,
    log_level: Optional[str] = None,
) -> None:
    """Configure structured logging with structlog.

    Args:
        service_name: Name bound to every log line. Defaults to APP_NAME.
        log_format: "json" for production, "console" for development.
            Defaults to LOG_FORMAT.
        log_level: DEBUG, INFO, WARNING or ERROR. Defaults to LOG_LEVEL.
    """
    service_name = service_name or settings.APP_NAME
    log_format = log_format or settings.LOG_FORMAT
    log_level = log_level or settings.LOG_LEVEL

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
        force=True,
    )

    processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=False),
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer(sort_keys=False))
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=service_name)

    get_logger(__name__).info(
        "logging_initialized",
        log_format=log_format,
        log_level=log_level,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)
