"""Site pages served at the root.

Pages are returned as JSON view models; a template layer can render them.
"""

from typing import Any

from fastapi import APIRouter, Request

from natours import __version__
from natours.api.deps import Repos
from natours.core.exceptions import NotFoundError
from natours.services.query import QueryFeatures

router = APIRouter()

OVERVIEW_FIELDS = "name,slug,summary,difficulty,duration,price,ratingsAverage,imageCover"


@router.get("/", summary="All tours overview")
async def overview(request: Request, repos: Repos) -> dict[str, Any]:
    features = QueryFeatures.from_query({"fields": OVERVIEW_FIELDS, "sort": "name"})
    tours, _ = await repos.tours.find(features)
    return {
        "title": "All Tours",
        "tours": tours,
        "app": request.app.title,
        "version": __version__,
    }


@router.get("/tour/{slug}", summary="Tour detail page")
async def tour_page(slug: str, repos: Repos) -> dict[str, Any]:
    tour = await repos.tours.find_one(slug=slug)
    if tour is None:
        raise NotFoundError(message="There is no tour with that name.")

    features = QueryFeatures.from_query({"tour": tour["id"], "fields": "review,rating,user"})
    reviews, _ = await repos.reviews.find(features)
    return {
        "title": f"{tour['name']} Tour",
        "tour": tour,
        "reviews": reviews,
    }
