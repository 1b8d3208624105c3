"""
Centralized Error Handling

Provides the exception hierarchy raised by the contact pipeline and the
static file layer, plus helpers that classify and log failures so API
handlers can map them to HTTP responses without leaking internal detail.
"""

import logging
from typing import Any, Dict, Optional
from enum import Enum
from dataclasses import dataclass
from datetime import datetime

logger = logging.getLogger(__name__)


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class PortfolioError(Exception):
    """Base exception for all portfolio-site errors."""

    status_code = 500
    public_message = "Unexpected server error"

    def __init__(self, message: str, component: str = "unknown",
                 context: Optional[Dict[str, Any]] = None):
        """Initialize exception with metadata.

        Args:
            message: Error message (safe to show to clients for 4xx errors)
            component: Component where error occurred
            context: Additional context data
        """
        self.message = message
        self.component = component
        self.context = context or {}
        self.timestamp = datetime.now()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to structured log format."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }


class PayloadTooLargeError(PortfolioError):
    """Raised when a request body exceeds the configured size limit."""
    status_code = 413
    public_message = "Message is too large."


class BodyParseError(PortfolioError):
    """Raised when a request body cannot be decoded for its content type."""
    status_code = 400
    public_message = "Request body could not be parsed."


class ContactValidationError(PortfolioError):
    """Raised when a contact submission fails field validation."""
    status_code = 400


class ForbiddenPathError(PortfolioError):
    """Raised when a static path resolves outside the public root."""
    status_code = 403
    public_message = "Forbidden"


class StorageError(PortfolioError):
    """Raised when the contact store cannot be read or written."""
    status_code = 500
    public_message = (
        "Something went wrong while sending your message. Please try again later."
    )


# ============================================================================
# Error Classification
# ============================================================================

class ErrorSeverity(Enum):
    """Severity levels for errors."""
    HIGH = "high"              # Server-side failure, client sees a 5xx
    LOW = "low"                # Client input error, client sees a 4xx


@dataclass
class ErrorContext:
    """Structured representation of an error occurrence."""
    error_type: str
    component: str
    message: str
    severity: ErrorSeverity
    status_code: int
    context_data: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.context_data is None:
            self.context_data = {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to structured log format."""
        return {
            "error_type": self.error_type,
            "component": self.component,
            "message": self.message,
            "severity": self.severity.value,
            "status_code": self.status_code,
            "context": self.context_data,
        }


def classify_error(exc: Exception, component: str,
                   context: Optional[Dict[str, Any]] = None) -> ErrorContext:
    """
    Classify an exception and return structured error context.

    Portfolio errors keep their own status code; anything else is treated
    as an unexpected server failure.

    Args:
        exc: The exception to classify
        component: Name of the component where error occurred
        context: Optional context data about the error

    Returns:
        ErrorContext with classification and metadata
    """
    context = dict(context or {})
    status_code = 500

    if isinstance(exc, PortfolioError):
        status_code = exc.status_code
        context.update(exc.context)
        component = exc.component if exc.component != "unknown" else component

    severity = ErrorSeverity.HIGH if status_code >= 500 else ErrorSeverity.LOW

    return ErrorContext(
        error_type=exc.__class__.__name__,
        component=component,
        message=str(exc),
        severity=severity,
        status_code=status_code,
        context_data=context,
    )


def public_error_message(exc: Exception) -> str:
    """Return the message a client is allowed to see for ``exc``."""
    if isinstance(exc, ContactValidationError):
        return exc.message
    if isinstance(exc, PortfolioError):
        return exc.public_message
    return PortfolioError.public_message


def log_error(error_ctx: ErrorContext, logger_obj: Optional[logging.Logger] = None,
              exc_info: bool = False):
    """
    Log an error with structured format.

    Args:
        error_ctx: ErrorContext to log
        logger_obj: Logger instance (defaults to module logger)
        exc_info: Attach the active traceback (server errors only)
    """
    if logger_obj is None:
        logger_obj = logger

    # 'message' is reserved on LogRecord
    log_data_extra = {k: v for k, v in error_ctx.to_dict().items() if k != 'message'}

    if error_ctx.severity == ErrorSeverity.HIGH:
        logger_obj.error(f"ERROR in {error_ctx.component}: {error_ctx.message}",
                         extra=log_data_extra, exc_info=exc_info)
    else:
        logger_obj.info(f"Rejected request in {error_ctx.component}: {error_ctx.message}",
                        extra=log_data_extra)
