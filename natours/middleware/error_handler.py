"""Turn unexpected exceptions into error responses inside the middleware stack."""

from typing import Optional

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from natours.config import Settings, settings as default_settings
from natours.core.errors import unexpected_error_response


class UnhandledErrorMiddleware:
    """
    Render exceptions that escaped every route handler as a 500 envelope.

    Sits inside the request id, CORS and security header layers so those
    headers reach failed responses as well. Once a response has started
    there is nothing left to replace, and the exception propagates.
    """

    def __init__(self, app: ASGIApp, settings: Optional[Settings] = None):
        self.app = app
        self.settings = settings or default_settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                raise
            response = unexpected_error_response(Request(scope), exc, self.settings)
            await response(scope, receive, send)
