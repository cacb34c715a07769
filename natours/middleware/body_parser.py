"""Request body parsing middleware."""

import json
from typing import Any, Optional

import structlog
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from natours.config import Settings, settings as default_settings
from natours.core.errors import error_response
from natours.core.exceptions import AppError, BadRequestError, PayloadTooLargeError
from natours.utils.querystring import encode_query, parse_query

logger = structlog.get_logger()

JSON = "json"
URLENCODED = "urlencoded"
RAW = "raw"


class ClientDisconnected(Exception):
    """Client went away before the body was complete."""


def body_kind(media_type: str) -> Optional[str]:
    """Classify a media type as one of the parsed body kinds."""
    if media_type == "application/json" or media_type.endswith("+json"):
        return JSON
    if media_type == "application/x-www-form-urlencoded":
        return URLENCODED
    return None


def serialize_body(kind: Optional[str], body: Any) -> bytes:
    """Turn a parsed (and possibly sanitized) body back into bytes."""
    if body is None:
        return b""
    if kind == JSON:
        return json.dumps(body, ensure_ascii=False).encode("utf-8")
    if kind == URLENCODED:
        return encode_query(body).encode("utf-8")
    return body


class BodyParserMiddleware:
    """
    Parse JSON and urlencoded bodies into ``request.state.body``.

    Bodies over the configured limit are rejected with 413 before they
    reach any route. Downstream middleware may replace ``state["body"]``;
    the route receives whatever is stored there when it first reads the
    body. The webhook path is read raw with its own limit and passed on
    untouched.
    """

    def __init__(self, app: ASGIApp, settings: Optional[Settings] = None):
        self.app = app
        self.settings = settings or default_settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        state["body"] = None
        state["body_kind"] = None

        headers = Headers(scope=scope)
        media_type = headers.get("content-type", "").split(";")[0].strip().lower()

        if scope["method"] == "POST" and scope["path"] == self.settings.webhook_path:
            kind = RAW
            limit = self.settings.raw_body_limit_bytes
        else:
            kind = body_kind(media_type)
            limit = self.settings.body_limit_bytes

        if kind is None:
            await self.app(scope, receive, send)
            return

        try:
            declared = headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > limit:
                raise PayloadTooLargeError(limit)

            body = await self._read_body(receive, limit)

            if kind == RAW:
                state["raw_body"] = body
                parsed: Any = body
            else:
                parsed = self._parse(kind, body)
        except ClientDisconnected:
            return
        except AppError as exc:
            logger.info(
                "body_rejected",
                path=scope["path"],
                status_code=exc.status_code,
                reason=exc.code,
            )
            response = error_response(exc, state.get("request_id"))
            await response(scope, receive, send)
            return

        state["body"] = parsed
        state["body_kind"] = kind

        if kind != RAW:
            # The replayed body may differ in length once sanitized
            scope["headers"] = [
                (name, value) for name, value in scope["headers"]
                if name.lower() != b"content-length"
            ]

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {
                    "type": "http.request",
                    "body": serialize_body(state.get("body_kind"), state.get("body")),
                    "more_body": False,
                }
            return await receive()

        await self.app(scope, replay, send)

    async def _read_body(self, receive: Receive, limit: int) -> bytes:
        chunks = []
        size = 0
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                raise ClientDisconnected()
            chunk = message.get("body", b"")
            size += len(chunk)
            if size > limit:
                raise PayloadTooLargeError(limit)
            chunks.append(chunk)
            if not message.get("more_body", False):
                return b"".join(chunks)

    def _parse(self, kind: str, body: bytes) -> Any:
        if not body.strip():
            return None

        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError:
            raise BadRequestError("Request body is not valid UTF-8", code="INVALID_BODY")

        if kind == URLENCODED:
            return parse_query(text)

        try:
            parsed = json.loads(text)
        except ValueError:
            raise BadRequestError("Malformed JSON in request body", code="INVALID_JSON")

        # Only objects and arrays are accepted at the top level
        if not isinstance(parsed, (dict, list)):
            raise BadRequestError(
                "JSON body must be an object or an array", code="INVALID_JSON"
            )
        return parsed
