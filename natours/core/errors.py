"""Centralized error handling."""

import traceback
from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from natours.config import Settings
from natours.core.exceptions import AppError, ValidationError

logger = structlog.get_logger()

GENERIC_ERROR_MESSAGE = "Something went very wrong!"


def error_response(
    exc: AppError,
    request_id: Optional[str] = None,
    extra: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    """Render an operational error as a JSON response."""
    content = exc.to_dict()
    if extra:
        content.update(extra)
    if request_id:
        content["request_id"] = request_id
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=exc.headers,
    )


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def _development_extra(exc: BaseException, status_code: int) -> dict[str, Any]:
    return {
        "error": {
            "type": type(exc).__name__,
            "status_code": status_code,
            "detail": str(exc),
        },
        "stack": traceback.format_exception(type(exc), exc, exc.__traceback__),
    }


def unexpected_error_response(
    request: Request, exc: Exception, settings: Settings
) -> JSONResponse:
    """Log an unanticipated exception and render it as a generic 500."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        request_id=_request_id(request),
    )

    message = str(exc) if settings.is_development else GENERIC_ERROR_MESSAGE
    app_error = AppError(
        message=message or GENERIC_ERROR_MESSAGE,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="INTERNAL_ERROR",
    )
    extra = None
    if settings.is_development:
        extra = _development_extra(exc, app_error.status_code)
    return error_response(app_error, _request_id(request), extra)


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """
    Attach the global error handlers to the application.

    Development responses include the exception type and stack trace.
    Elsewhere operational errors expose only their message and anything
    unexpected becomes a generic 500.
    """

    def render(request: Request, exc: AppError, original: BaseException) -> JSONResponse:
        extra = None
        if settings.is_development:
            extra = _development_extra(original, exc.status_code)
        return error_response(exc, _request_id(request), extra)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Handle operational errors raised by routes."""
        if exc.status_code >= 500:
            logger.error(
                "app_error",
                error=exc.message,
                code=exc.code,
                path=request.url.path,
                request_id=_request_id(request),
            )
        return render(request, exc, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        details = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            details.append({
                "field": field,
                "message": error["msg"],
            })

        messages = ". ".join(f"{d['field']}: {d['message']}" for d in details)
        app_error = ValidationError(
            message=f"Invalid input data. {messages}".strip(),
            details=details,
        )
        return render(request, app_error, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Map framework HTTP errors (405 and friends) onto the error envelope."""
        app_error = AppError(
            message=str(exc.detail),
            status_code=exc.status_code,
            code="HTTP_ERROR",
            headers=getattr(exc, "headers", None),
        )
        return render(request, app_error, exc)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Last resort for errors raised outside the middleware that catches them."""
        return unexpected_error_response(request, exc, settings)
