"""Review API endpoints."""

from typing import Any

from fastapi import APIRouter, Request

from natours.api.v1.factory import register_crud_routes
from natours.core.exceptions import NotFoundError
from natours.schemas.review import ReviewCreate, ReviewUpdate
from natours.services.repository import Repositories

router = APIRouter()


async def prepare_review(request: Request, doc: dict[str, Any], repos: Repositories) -> dict[str, Any]:
    """Reviews must point at an existing tour."""
    if await repos.tours.get(doc["tour"]) is None:
        raise NotFoundError(resource="Tour")
    return doc


register_crud_routes(
    router,
    collection="reviews",
    resource="Review",
    create_schema=ReviewCreate,
    update_schema=ReviewUpdate,
    prepare_create=prepare_review,
)
