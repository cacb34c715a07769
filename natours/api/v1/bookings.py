"""Booking API endpoints."""

from typing import Any

from fastapi import APIRouter, Request

from natours.api.v1.factory import register_crud_routes
from natours.core.exceptions import NotFoundError
from natours.schemas.booking import BookingCreate, BookingUpdate
from natours.services.repository import Repositories

router = APIRouter()


async def prepare_booking(request: Request, doc: dict[str, Any], repos: Repositories) -> dict[str, Any]:
    if await repos.tours.get(doc["tour"]) is None:
        raise NotFoundError(resource="Tour")
    if await repos.users.get(doc["user"]) is None:
        raise NotFoundError(resource="User")
    return doc


register_crud_routes(
    router,
    collection="bookings",
    resource="Booking",
    create_schema=BookingCreate,
    update_schema=BookingUpdate,
    prepare_create=prepare_booking,
)
