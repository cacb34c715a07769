"""Request context middleware: request IDs, arrival time and cookies."""

from datetime import datetime, timezone
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with an ID for log and error correlation.

    An ID sent by the client or a proxy is reused when it is short enough
    to be one. The ID lands on ``request.state.request_id`` and goes back
    in the ``X-Request-ID`` response header.
    """

    HEADER_NAME = "X-Request-ID"
    MAX_LENGTH = 128

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Add request ID to request and response."""
        request_id = request.headers.get(self.HEADER_NAME, "")
        if not request_id or len(request_id) > self.MAX_LENGTH:
            request_id = str(uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[self.HEADER_NAME] = request_id

        return response


class CookieParserMiddleware(BaseHTTPMiddleware):
    """Expose parsed cookies on ``request.state.cookies``."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.cookies = dict(request.cookies)
        return await call_next(request)


class RequestTimeMiddleware(BaseHTTPMiddleware):
    """Stamp each request with its arrival time as an ISO-8601 string."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request.state.request_time = datetime.now(timezone.utc).isoformat()
        return await call_next(request)
