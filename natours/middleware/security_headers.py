"""Security headers middleware."""

from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from natours.config import Settings, settings as default_settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add the standard set of security headers to all responses."""

    SECURITY_HEADERS = {
        "Cross-Origin-Opener-Policy": "same-origin",
        "Cross-Origin-Resource-Policy": "same-origin",
        "Origin-Agent-Cluster": "?1",
        "Referrer-Policy": "no-referrer",
        "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
        # Prevent MIME type sniffing
        "X-Content-Type-Options": "nosniff",
        "X-DNS-Prefetch-Control": "off",
        "X-Download-Options": "noopen",
        # Prevent clickjacking from other origins
        "X-Frame-Options": "SAMEORIGIN",
        "X-Permitted-Cross-Domain-Policies": "none",
        # The legacy browser filter causes more problems than it solves
        "X-XSS-Protection": "0",
    }

    # Headers that advertise the server stack
    REMOVED_HEADERS = ("X-Powered-By", "Server")

    CSP_DIRECTIVES_STRICT = {
        "default-src": "'self'",
        "base-uri": "'self'",
        "font-src": "'self' https: data:",
        "form-action": "'self'",
        "frame-ancestors": "'self'",
        "img-src": "'self' data:",
        "object-src": "'none'",
        "script-src": "'self'",
        "script-src-attr": "'none'",
        "style-src": "'self' https: 'unsafe-inline'",
        "upgrade-insecure-requests": "",
    }

    # Content Security Policy (relaxed for Swagger UI in debug mode)
    CSP_DIRECTIVES_DEBUG = {
        "default-src": "'self'",
        "script-src": "'self' 'unsafe-inline' https://cdn.jsdelivr.net https://unpkg.com",
        "style-src": "'self' 'unsafe-inline' https://cdn.jsdelivr.net https://unpkg.com",
        "img-src": "'self' data: https: https://fastapi.tiangolo.com",
        "font-src": "'self' https://cdn.jsdelivr.net https://fonts.gstatic.com",
        "connect-src": "'self'",
        "frame-ancestors": "'self'",
        "form-action": "'self'",
        "base-uri": "'self'",
    }

    # Paths that need relaxed CSP for documentation UI
    DOCS_PATHS = {"/docs", "/redoc", "/openapi.json"}

    def __init__(self, app: ASGIApp, settings: Optional[Settings] = None):
        super().__init__(app)
        self.settings = settings or default_settings

    @staticmethod
    def build_csp(directives: dict[str, str]) -> str:
        return ";".join(f"{k} {v}".strip() for k, v in directives.items())

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Add security headers to the response."""
        response = await call_next(request)

        for header, value in self.SECURITY_HEADERS.items():
            response.headers[header] = value

        for header in self.REMOVED_HEADERS:
            if header in response.headers:
                del response.headers[header]

        # Use relaxed CSP for docs pages in debug mode, strict CSP otherwise
        if self.settings.debug and request.url.path in self.DOCS_PATHS:
            csp_directives = self.CSP_DIRECTIVES_DEBUG
        else:
            csp_directives = self.CSP_DIRECTIVES_STRICT

        response.headers["Content-Security-Policy"] = self.build_csp(csp_directives)

        return response
