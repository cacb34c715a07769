"""Input sanitization middleware for parsed bodies and query strings."""

from typing import Any, Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from natours.config import Settings, settings as default_settings
from natours.middleware.body_parser import JSON, URLENCODED
from natours.utils.querystring import encode_query, parse_query
from natours.utils.sanitizers import (
    clean_xss,
    collapse_polluted_params,
    strip_mongo_operators,
)

logger = structlog.get_logger()


class SanitizerMiddleware(BaseHTTPMiddleware):
    """
    Base class for middleware rewriting the parsed body and query.

    Subclasses implement ``sanitize_body`` and ``sanitize_query``; the
    rewritten query is written back into the ASGI scope so every later
    reader sees the sanitized version.
    """

    # Body kinds this sanitizer touches
    BODY_KINDS: frozenset[str] = frozenset({JSON, URLENCODED})

    def __init__(self, app: ASGIApp, settings: Optional[Settings] = None):
        super().__init__(app)
        self.settings = settings or default_settings

    def sanitize_body(self, request: Request, body: Any) -> Any:
        return body

    def sanitize_query(self, request: Request, query: dict[str, Any]) -> dict[str, Any]:
        return query

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        state = request.scope.setdefault("state", {})

        if state.get("body") is not None and state.get("body_kind") in self.BODY_KINDS:
            state["body"] = self.sanitize_body(request, state["body"])

        raw_query = request.scope.get("query_string", b"")
        if raw_query:
            query = parse_query(raw_query.decode("latin-1"))
            sanitized = self.sanitize_query(request, query)
            if sanitized != query:
                request.scope["query_string"] = encode_query(sanitized).encode("latin-1")

        return await call_next(request)


class MongoSanitizeMiddleware(SanitizerMiddleware):
    """Remove ``$``-prefixed and dotted keys that could become query operators."""

    def _strip(self, request: Request, value: Any, location: str) -> Any:
        cleaned, changed = strip_mongo_operators(
            value, replace_with=self.settings.mongo_sanitize_replace_with
        )
        if changed:
            logger.warning(
                "operator_keys_removed",
                location=location,
                path=request.url.path,
                request_id=getattr(request.state, "request_id", None),
            )
        return cleaned

    def sanitize_body(self, request: Request, body: Any) -> Any:
        return self._strip(request, body, "body")

    def sanitize_query(self, request: Request, query: dict[str, Any]) -> dict[str, Any]:
        return self._strip(request, query, "query")


class XSSCleanMiddleware(SanitizerMiddleware):
    """Escape HTML markup in every string of the body and query."""

    def sanitize_body(self, request: Request, body: Any) -> Any:
        return clean_xss(body)

    def sanitize_query(self, request: Request, query: dict[str, Any]) -> dict[str, Any]:
        return clean_xss(query)


class ParameterPollutionMiddleware(SanitizerMiddleware):
    """
    Collapse repeated parameters to their last value.

    Whitelisted names keep all their values. The discarded originals are
    kept on ``request.state.query_polluted`` and ``request.state.body_polluted``.
    """

    BODY_KINDS = frozenset({URLENCODED})

    def sanitize_body(self, request: Request, body: Any) -> Any:
        if not isinstance(body, dict):
            return body
        cleaned, polluted = collapse_polluted_params(
            body, self.settings.hpp_whitelist_set
        )
        request.state.body_polluted = polluted
        return cleaned

    def sanitize_query(self, request: Request, query: dict[str, Any]) -> dict[str, Any]:
        cleaned, polluted = collapse_polluted_params(
            query, self.settings.hpp_whitelist_set
        )
        request.state.query_polluted = polluted
        return cleaned
