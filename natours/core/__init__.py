"""Core error handling, logging and security modules."""

from natours.core.exceptions import (
    AppError,
    BadRequestError,
    NotFoundError,
    PayloadTooLargeError,
    RateLimitError,
    ValidationError,
)
from natours.core.security import hash_password, verify_password

__all__ = [
    # Security
    "hash_password",
    "verify_password",
    # Exceptions
    "AppError",
    "BadRequestError",
    "NotFoundError",
    "PayloadTooLargeError",
    "RateLimitError",
    "ValidationError",
]
