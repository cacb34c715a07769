"""Payment provider webhook endpoint."""

import json
from typing import Any, Awaitable, Callable

import structlog
from fastapi import APIRouter, Request

from natours.core.exceptions import BadRequestError

logger = structlog.get_logger()

router = APIRouter()

WebhookHandler = Callable[[Request, dict[str, Any]], Awaitable[None]]


async def log_webhook_event(request: Request, event: dict[str, Any]) -> None:
    """Default handler: record the event and acknowledge it."""
    logger.info(
        "webhook_received",
        event_type=event.get("type"),
        event_id=event.get("id"),
        request_id=getattr(request.state, "request_id", None),
    )


@router.post("", summary="Payment checkout webhook", include_in_schema=False)
async def webhook_checkout(request: Request) -> dict[str, bool]:
    """
    Receive a checkout event with its body untouched.

    The raw bytes stay available on ``request.state.raw_body`` so a handler
    can verify the provider's signature before trusting the payload.
    """
    raw = getattr(request.state, "raw_body", None)
    if raw is None:
        raw = await request.body()

    try:
        event = json.loads(raw) if raw else None
    except ValueError as exc:
        raise BadRequestError(f"Webhook error: {exc}", code="INVALID_WEBHOOK")
    if not isinstance(event, dict):
        raise BadRequestError("Webhook error: event must be a JSON object", code="INVALID_WEBHOOK")

    handler: WebhookHandler = getattr(request.app.state, "webhook_handler", log_webhook_event)
    await handler(request, event)

    return {"received": True}
