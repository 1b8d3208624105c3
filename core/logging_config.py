"""
Structured Logging Module

structlog event logging for request/submission events, with stdlib
``logging`` routed either to a console formatter or to JSON lines.
"""

import logging
import sys
from typing import Optional
import structlog
from pythonjsonlogger import jsonlogger

# ============================================================================
# STRUCTURED LOGGING CONFIGURATION
# ============================================================================

def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    service_name: str = "portfolio-site",
):
    """
    Configure structlog and the root stdlib logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: ``console`` for human readable output, ``json`` for JSON lines
        service_name: Name bound into every structlog event
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
        formatter = jsonlogger.JsonFormatter(
            fmt='%(asctime)s %(levelname)s %(name)s %(message)s',
            timestamp=True
        )
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a structured logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structlog logger instance
    """
    return structlog.get_logger(name)


def log_request(
    logger: structlog.BoundLogger,
    method: str,
    endpoint: str,
    status: int,
    duration_ms: float,
    **extra
):
    """
    Log HTTP request with structured data

    Args:
        logger: Structlog logger instance
        method: HTTP method
        endpoint: Request path
        status: HTTP status code
        duration_ms: Request duration in milliseconds
        **extra: Additional context fields
    """
    logger.info(
        "http_request",
        method=method,
        endpoint=endpoint,
        status=status,
        duration_ms=round(duration_ms, 2),
        **extra
    )


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    context: str,
    **extra
):
    """
    Log error with full context and stack trace

    Args:
        logger: Structlog logger instance
        error: Exception instance
        context: Event name
        **extra: Additional context fields
    """
    logger.error(
        context,
        error_type=type(error).__name__,
        error_message=str(error),
        exc_info=error,
        **extra
    )


def log_submission(
    logger: structlog.BoundLogger,
    submission_id: str,
    client_ip: Optional[str],
    message_length: int,
):
    """Log an accepted contact submission (no personal fields)."""
    logger.info(
        "contact_submitted",
        submission_id=submission_id,
        client_ip=client_ip,
        message_length=message_length,
    )
