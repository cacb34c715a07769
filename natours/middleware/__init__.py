"""Middleware components for the application."""

from natours.middleware.body_parser import BodyParserMiddleware
from natours.middleware.error_handler import UnhandledErrorMiddleware
from natours.middleware.rate_limiter import RateLimitMiddleware
from natours.middleware.request_context import (
    CookieParserMiddleware,
    RequestIDMiddleware,
    RequestTimeMiddleware,
)
from natours.middleware.request_logger import RequestLoggingMiddleware
from natours.middleware.sanitize import (
    MongoSanitizeMiddleware,
    ParameterPollutionMiddleware,
    XSSCleanMiddleware,
)
from natours.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "BodyParserMiddleware",
    "CookieParserMiddleware",
    "MongoSanitizeMiddleware",
    "ParameterPollutionMiddleware",
    "RateLimitMiddleware",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
    "RequestTimeMiddleware",
    "SecurityHeadersMiddleware",
    "UnhandledErrorMiddleware",
    "XSSCleanMiddleware",
]
