"""
Portfolio Core - Error Handling, Logging & Contact Storage

Shared building blocks for the site server: the exception hierarchy,
structured logging setup and the JSON contact store.
"""

from .error_handling import (
    PortfolioError,
    PayloadTooLargeError,
    BodyParseError,
    ContactValidationError,
    ForbiddenPathError,
    StorageError,
    classify_error,
    log_error,
)
from .contact_store import ContactStore

__all__ = [
    # Exceptions
    "PortfolioError",
    "PayloadTooLargeError",
    "BodyParseError",
    "ContactValidationError",
    "ForbiddenPathError",
    "StorageError",
    # Error handling
    "classify_error",
    "log_error",
    # Storage
    "ContactStore",
]
