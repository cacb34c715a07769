"""Request logging middleware."""

import time
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from natours.config import Settings, settings as default_settings
from natours.core.logging import mask_sensitive
from natours.utils.network import get_client_ip

logger = structlog.get_logger()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that logs one line per request.

    Logs:
    - Method and original URL
    - Response status, timing and size
    - Client IP and request ID
    - Sensitive query values are masked
    """

    def __init__(self, app: ASGIApp, settings: Optional[Settings] = None):
        super().__init__(app)
        self.settings = settings or default_settings

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Log request and response details."""
        start_time = time.perf_counter()
        query_params = mask_sensitive(dict(request.query_params))

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        context = {
            "request_id": getattr(request.state, "request_id", None),
            "method": request.method,
            "path": request.url.path,
            "query_params": query_params,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
            "content_length": response.headers.get("content-length", "-"),
            "client_ip": get_client_ip(request, self.settings.trust_proxy),
        }

        # Determine log level based on status code
        if response.status_code >= 500:
            logger.error("request_completed", **context)
        elif response.status_code >= 400:
            logger.warning("request_completed", **context)
        else:
            logger.info("request_completed", **context)

        return response
