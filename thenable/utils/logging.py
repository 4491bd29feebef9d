"""
Logging Utilities

This module provides structlog-based logging helpers for thenable.
"""

import logging
import sys
from typing import Any, Dict, Optional

import structlog


_SHARED_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def get_logger(name: str) -> Any:
    """
    Get a logger for the specified name

    Args:
        name: Logger name (usually the module name)

    Returns:
        structlog bound logger backed by the stdlib logger of the same name
    """
    if not structlog.is_configured():
        structlog.configure(
            processors=_SHARED_PROCESSORS
            + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    return structlog.get_logger(name)


def configure_logging(
    level: str = "INFO", format_string: Optional[str] = None, use_structlog: bool = True
) -> None:
    """
    Configure logging for thenable components

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string (for standard logging)
        use_structlog: Render through structlog's console renderer
    """
    numeric_level = getattr(logging, level.upper())
    format_string = format_string or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    if use_structlog:
        structlog.configure(
            processors=_SHARED_PROCESSORS + [structlog.dev.ConsoleRenderer()],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("thenable").setLevel(numeric_level)


def log_settlement(
    logger: Any,
    future_id: str,
    status: str,
    outcome: Any,
    callbacks: int,
) -> None:
    """
    Log a future leaving the pending state

    Args:
        logger: Logger instance
        future_id: Identifier of the settled future
        status: Terminal status name ("fulfilled" or "rejected")
        outcome: Value or reason the future settled with
        callbacks: Number of registered callbacks being drained
    """
    logger.debug(
        "future_settled",
        future_id=future_id,
        status=status,
        outcome=repr(outcome),
        callbacks=callbacks,
    )


def log_queue_event(
    logger: Any,
    queue_name: str,
    event_type: str,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log a callback queue event

    Args:
        logger: Logger instance
        queue_name: Name of the queue implementation
        event_type: Type of event (e.g., "drain_started", "drain_finished")
        details: Additional event details
    """
    logger.debug(
        f"queue_{event_type}",
        queue=queue_name,
        **(details or {}),
    )
