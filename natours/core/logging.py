"""Structured logging setup."""

import logging

import structlog

from natours.config import Settings

# Map log level string to logging constants
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Sensitive fields to mask in logs
SENSITIVE_FIELDS = {
    "password",
    "passwordconfirm",
    "password_confirm",
    "passwordcurrent",
    "token",
    "access_token",
    "jwt",
    "authorization",
    "api_key",
    "secret",
    "stripe-signature",
}


def configure_logging(settings: Settings) -> None:
    """Configure structlog for the whole process."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            LOG_LEVELS.get(settings.log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def mask_sensitive(data: dict) -> dict:
    """Mask sensitive fields in the data."""
    masked = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_FIELDS:
            masked[key] = "***MASKED***"
        elif isinstance(value, dict):
            masked[key] = mask_sensitive(value)
        else:
            masked[key] = value
    return masked
