"""Custom exception classes for the application."""

from typing import Any, Optional

from fastapi import status


class AppError(Exception):
    """
    Operational error with a message that is safe to send to clients.

    4xx errors carry status "fail", everything else "error".
    """

    is_operational = True

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        code: str = "APP_ERROR",
        details: Optional[list[dict[str, Any]]] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.headers = headers

    @property
    def status(self) -> str:
        return "fail" if 400 <= self.status_code < 500 else "error"

    def to_dict(self) -> dict[str, Any]:
        """Build the standard error envelope."""
        body: dict[str, Any] = {
            "status": self.status,
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


class BadRequestError(AppError):
    """Malformed request exception."""

    def __init__(
        self,
        message: str = "Bad request",
        code: str = "BAD_REQUEST",
        details: Optional[list[dict[str, Any]]] = None,
    ):
        super().__init__(
            message,
            status_code=status.HTTP_400_BAD_REQUEST,
            code=code,
            details=details,
        )


class NotFoundError(AppError):
    """Resource not found exception."""

    def __init__(
        self,
        message: Optional[str] = None,
        resource: str = "Resource",
        code: str = "NOT_FOUND",
    ):
        super().__init__(
            message or f"No {resource.lower()} found with that ID",
            status_code=status.HTTP_404_NOT_FOUND,
            code=code,
        )


class ValidationError(AppError):
    """Validation error exception."""

    def __init__(
        self,
        message: str = "Invalid input data.",
        details: Optional[list[dict[str, Any]]] = None,
        code: str = "VALIDATION_ERROR",
    ):
        super().__init__(
            message,
            status_code=status.HTTP_400_BAD_REQUEST,
            code=code,
            details=details,
        )


class PayloadTooLargeError(AppError):
    """Request body exceeds the configured limit."""

    def __init__(self, limit: int, code: str = "PAYLOAD_TOO_LARGE"):
        super().__init__(
            f"Request entity too large. Maximum size is {limit // 1024}KB.",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            code=code,
        )


class RateLimitError(AppError):
    """Rate limit exceeded exception."""

    def __init__(
        self,
        message: str = "Too many requests",
        retry_after: int = 60,
        code: str = "RATE_LIMIT_EXCEEDED",
    ):
        super().__init__(
            message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            code=code,
            headers={"Retry-After": str(retry_after)},
        )
