"""Structured logging setup.

structlog is configured on top of the standard library logger, rendering
either JSON lines or colored console output.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from perp_analytics.config import LogFormat, get_settings


def setup_logging() -> None:
    """Configure structlog from the current settings."""
    settings = get_settings()

    log_level = getattr(logging, settings.log_level)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == LogFormat.JSON:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structured logger.

    Args:
        name: Logger name. Defaults to the calling module.

    Returns:
        A bound structlog logger.
    """
    return structlog.get_logger(name)


def log_metrics_computed(
    logger: structlog.stdlib.BoundLogger,
    *,
    trade_count: int,
    day_count: int,
    elapsed_ms: float,
    **kwargs: Any,
) -> None:
    """Log one completed dashboard computation."""
    logger.info(
        "metrics_computed",
        trade_count=trade_count,
        day_count=day_count,
        elapsed_ms=round(elapsed_ms, 2),
        **kwargs,
    )


def log_store_event(
    logger: structlog.stdlib.BoundLogger,
    *,
    action: str,
    path: str,
    count: int,
    **kwargs: Any,
) -> None:
    """Log a trade store read or write."""
    logger.info(
        f"trades_{action}",
        path=path,
        count=count,
        **kwargs,
    )
