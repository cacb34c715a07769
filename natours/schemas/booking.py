"""Booking schemas for request validation."""

from typing import Optional

from pydantic import Field

from natours.schemas.common import BaseSchema


class BookingCreate(BaseSchema):
    """Schema for creating a booking."""

    tour: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    paid: bool = True


class BookingUpdate(BaseSchema):
    """Schema for updating a booking."""

    price: Optional[float] = Field(default=None, gt=0)
    paid: Optional[bool] = None
