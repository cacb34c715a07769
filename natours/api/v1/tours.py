"""Tour API endpoints."""

import re
from typing import Any

from fastapi import APIRouter, Request, status

from natours.api.deps import Payload, QueryDict, Repos
from natours.api.v1.factory import (
    envelope,
    register_crud_routes,
    validate_payload,
)
from natours.core.exceptions import NotFoundError
from natours.schemas.review import ReviewCreate
from natours.schemas.tour import TourCreate, TourUpdate
from natours.services.query import QueryFeatures
from natours.services.repository import Repositories

router = APIRouter()


def slugify(text: str) -> str:
    """Lowercase, hyphen separated version of a name for URLs."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    return re.sub(r"[\s_-]+", "-", slug).strip("-")


async def prepare_tour(request: Request, doc: dict[str, Any], repos: Repositories) -> dict[str, Any]:
    doc["slug"] = slugify(doc["name"])
    return doc


@router.get("/top-5-cheap", summary="Five best rated, cheapest tours")
async def top_five_cheap(repos: Repos) -> dict[str, Any]:
    """Alias listing the five best rated tours, cheapest first."""
    features = QueryFeatures.from_query({
        "limit": "5",
        "sort": "-ratingsAverage,price",
        "fields": "name,price,ratingsAverage,summary,difficulty",
    })
    docs, total = await repos.tours.find(features)
    return envelope(docs, results=len(docs), total=total)


@router.get("/{tour_id}/reviews", summary="List reviews of a tour")
async def list_tour_reviews(tour_id: str, repos: Repos, query: QueryDict) -> dict[str, Any]:
    """Reviews belonging to one tour."""
    if await repos.tours.get(tour_id) is None:
        raise NotFoundError(resource="Tour")
    features = QueryFeatures.from_query({**query, "tour": tour_id})
    docs, total = await repos.reviews.find(features)
    return envelope(docs, results=len(docs), total=total)


@router.post(
    "/{tour_id}/reviews",
    status_code=status.HTTP_201_CREATED,
    summary="Review a tour",
)
async def create_tour_review(tour_id: str, repos: Repos, payload: Payload) -> dict[str, Any]:
    """Create a review for the tour in the path."""
    if await repos.tours.get(tour_id) is None:
        raise NotFoundError(resource="Tour")
    doc = validate_payload(ReviewCreate, {**payload, "tour": tour_id})
    created = await repos.reviews.create(doc)
    return envelope(created)


register_crud_routes(
    router,
    collection="tours",
    resource="Tour",
    create_schema=TourCreate,
    update_schema=TourUpdate,
    prepare_create=prepare_tour,
)
