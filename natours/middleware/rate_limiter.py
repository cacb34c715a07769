"""Rate limiting middleware."""

import time
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from natours.config import Settings, settings as default_settings
from natours.core.errors import error_response
from natours.core.exceptions import RateLimitError
from natours.core.rate_limit import MemoryRateLimiter, RateLimiter
from natours.redis import RedisRateLimiter, get_redis
from natours.utils.network import get_client_ip

logger = structlog.get_logger()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware for rate limiting API requests per client IP.

    Only paths under the configured prefix are counted. The memory backend
    keeps counts in this process; the Redis backend shares them between
    workers.
    """

    def __init__(
        self,
        app: ASGIApp,
        settings: Optional[Settings] = None,
        limiter: Optional[RateLimiter] = None,
    ):
        super().__init__(app)
        self.settings = settings or default_settings
        self.prefix = self.settings.rate_limit_path_prefix.rstrip("/")
        if limiter is None and self.settings.rate_limit_backend == "memory":
            limiter = MemoryRateLimiter()
        self.limiter = limiter

    def applies_to(self, path: str) -> bool:
        """Check whether a path falls under the limited prefix."""
        if not self.prefix:
            return True
        return path == self.prefix or path.startswith(self.prefix + "/")

    async def _get_limiter(self) -> RateLimiter:
        if self.limiter is not None:
            return self.limiter
        return RedisRateLimiter(await get_redis(self.settings))

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Apply rate limiting to the request."""
        if not self.applies_to(request.url.path):
            return await call_next(request)

        client_ip = get_client_ip(request, self.settings.trust_proxy)
        max_requests = self.settings.rate_limit_max

        try:
            limiter = await self._get_limiter()
            is_allowed, remaining, retry_after = await limiter.is_allowed(
                key=f"api:{client_ip}",
                max_requests=max_requests,
                window_seconds=self.settings.rate_limit_window_seconds,
            )
        except Exception as exc:
            # A broken store must not take the whole API down
            logger.warning(
                "rate_limit_unavailable",
                error=str(exc),
                error_type=type(exc).__name__,
                client_ip=client_ip,
            )
            return await call_next(request)

        if not is_allowed:
            logger.warning(
                "rate_limit_exceeded",
                client_ip=client_ip,
                path=request.url.path,
                retry_after=retry_after,
            )
            error = RateLimitError(self.settings.rate_limit_message, retry_after=retry_after)
            response = error_response(error, getattr(request.state, "request_id", None))
            response.headers["X-RateLimit-Limit"] = str(max_requests)
            response.headers["X-RateLimit-Remaining"] = "0"
            response.headers["X-RateLimit-Reset"] = str(int(time.time()) + retry_after)
            return response

        response = await call_next(request)

        # Add rate limit headers
        response.headers["X-RateLimit-Limit"] = str(max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)

        return response
