"""Pydantic schemas for request validation."""

from natours.schemas.booking import BookingCreate, BookingUpdate
from natours.schemas.common import BaseSchema, HealthResponse
from natours.schemas.review import ReviewCreate, ReviewUpdate
from natours.schemas.tour import TourCreate, TourUpdate
from natours.schemas.user import UserCreate, UserUpdate

__all__ = [
    # Tour
    "TourCreate",
    "TourUpdate",
    # User
    "UserCreate",
    "UserUpdate",
    # Review
    "ReviewCreate",
    "ReviewUpdate",
    # Booking
    "BookingCreate",
    "BookingUpdate",
    # Common
    "BaseSchema",
    "HealthResponse",
]
