"""Tour schemas for request validation."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, model_validator

from natours.schemas.common import BaseSchema

Difficulty = Literal["easy", "medium", "difficult"]


class TourLocation(BaseSchema):
    """GeoJSON point with a description."""

    type: Literal["Point"] = "Point"
    coordinates: list[float] = Field(..., min_length=2, max_length=2)
    address: Optional[str] = None
    description: Optional[str] = None
    day: Optional[int] = Field(default=None, ge=0)


class TourCreate(BaseSchema):
    """Schema for creating a tour."""

    name: str = Field(..., min_length=10, max_length=40)
    duration: int = Field(..., gt=0)
    max_group_size: int = Field(..., gt=0)
    difficulty: Difficulty
    ratings_average: float = Field(default=4.5, ge=1, le=5)
    ratings_quantity: int = Field(default=0, ge=0)
    price: float = Field(..., gt=0)
    price_discount: Optional[float] = Field(default=None, ge=0)
    summary: str = Field(..., min_length=1)
    description: Optional[str] = None
    image_cover: str = Field(..., min_length=1)
    images: list[str] = Field(default_factory=list)
    start_dates: list[datetime] = Field(default_factory=list)
    secret_tour: bool = False
    start_location: Optional[TourLocation] = None
    locations: list[TourLocation] = Field(default_factory=list)
    guides: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_discount(self) -> "TourCreate":
        """A discount must stay below the regular price."""
        if self.price_discount is not None and self.price_discount >= self.price:
            raise ValueError("Discount price should be below regular price")
        return self


class TourUpdate(BaseSchema):
    """Schema for updating a tour."""

    name: Optional[str] = Field(default=None, min_length=10, max_length=40)
    duration: Optional[int] = Field(default=None, gt=0)
    max_group_size: Optional[int] = Field(default=None, gt=0)
    difficulty: Optional[Difficulty] = None
    ratings_average: Optional[float] = Field(default=None, ge=1, le=5)
    ratings_quantity: Optional[int] = Field(default=None, ge=0)
    price: Optional[float] = Field(default=None, gt=0)
    price_discount: Optional[float] = Field(default=None, ge=0)
    summary: Optional[str] = None
    description: Optional[str] = None
    image_cover: Optional[str] = None
    images: Optional[list[str]] = None
    start_dates: Optional[list[datetime]] = None
    secret_tour: Optional[bool] = None
    start_location: Optional[TourLocation] = None
    locations: Optional[list[TourLocation]] = None
    guides: Optional[list[str]] = None
