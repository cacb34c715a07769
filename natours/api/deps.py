"""API dependencies shared by the routers."""

from typing import Annotated, Any

from fastapi import Depends, Request

from natours.core.exceptions import ValidationError
from natours.services.repository import Repositories
from natours.utils.querystring import parse_query


def get_repositories(request: Request) -> Repositories:
    """Storage collections attached to the application."""
    return request.app.state.repositories


async def get_payload(request: Request) -> dict[str, Any]:
    """
    Read the request body as a document.

    The body arrives here after parsing and sanitization, so JSON and
    urlencoded submissions look the same to handlers.
    """
    kind = getattr(request.state, "body_kind", None)
    if kind == "json":
        payload = await request.json() if await request.body() else None
    elif kind == "urlencoded":
        raw = await request.body()
        payload = parse_query(raw.decode("utf-8")) if raw else None
    else:
        payload = None

    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")
    return payload


def get_query(request: Request) -> dict[str, Any]:
    """Nested view of the (sanitized) query string."""
    return parse_query(request.url.query)


# Type aliases for common dependencies
Repos = Annotated[Repositories, Depends(get_repositories)]
Payload = Annotated[dict[str, Any], Depends(get_payload)]
QueryDict = Annotated[dict[str, Any], Depends(get_query)]
